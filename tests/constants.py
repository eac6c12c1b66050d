from pathlib import Path

DATA_DIR = Path(__file__).parent / 'data'
BASE_URL = 'https://directory.test/api/'
EMAIL_DOMAIN = 'students.test.edu'
ORG_ID = '8812'
