SECRET_MASK = '********'


def get_header(token, custom_args: dict = None) -> dict:
    header = {
        'Authorization': f'Bearer {token}',
        'Accept': 'application/json'
    }

    if custom_args is not None:
        header.update(custom_args)
    return header


def mask_secret(secret) -> str:
    """Placeholder shown wherever a secret would otherwise be printed."""
    return SECRET_MASK if secret else ''
