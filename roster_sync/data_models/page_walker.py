from typing import Generator
import logging

import requests


class PageWalker(object):
    """
    A class designed to abstract the process of walking over multiple
    pagified responses from the account directory.
    """
    def __init__(self, session: requests.Session,
                 logger: logging.Logger = None, timeout: float = None):
        """
        :param session: an authenticated requests session
        :param logger: custom logger
        :param timeout: seconds to wait for each page
        """
        if logger is None:
            self.logger = logging.getLogger(__name__)
        else:
            self.logger = logger
        self.session = session
        self.timeout = timeout

    def walk(self, url: str) -> Generator[requests.Response, None, None]:
        """
        A generator for walking over the pagified responses. Pages are
        requested by setting the `page` header; the total is read off
        the `total-pages` header of the first response. A response
        without that header is treated as a single page.

        Error statuses are not handled here; the offending response is
        yielded and the walk ends.

        :param url: the URL to walk
        """
        current_page = 1
        headers = {'page': str(current_page)}
        r = self.session.get(url=url, headers=headers, timeout=self.timeout)
        try:
            r.raise_for_status()
            total_pages = int(r.headers.get('total-pages', 1))
        except (ValueError, requests.exceptions.HTTPError):
            yield r
            return

        while current_page <= total_pages:
            self.logger.info(f'Reading page {current_page}/{total_pages} '
                             'of roster response.')
            yield r
            current_page += 1
            if current_page <= total_pages:
                headers['page'] = str(current_page)
                r = self.session.get(url=url, headers=headers,
                                     timeout=self.timeout)
                if not r.ok:
                    yield r
                    return
