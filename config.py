import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    # Environment
    FLASK_ENV = os.getenv('FLASK_ENV', 'development')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

    # JotForm configuration
    # A key sent in the request body takes precedence over this one
    JOTFORM_API_KEY = os.getenv('JOTFORM_API_KEY')
    JOTFORM_API_URL = os.getenv('JOTFORM_API_URL', 'https://api.jotform.com')
    JOTFORM_TIMEOUT = int(os.getenv('JOTFORM_TIMEOUT', 30))

    # Stop a questions update at the first failed delete/update call
    QUESTION_UPDATES_ABORT_ON_FAILURE = os.getenv('QUESTION_UPDATES_ABORT_ON_FAILURE', 'False').lower() == 'true'

    # CORS
    CORS_ALLOW_ORIGIN = os.getenv('CORS_ALLOW_ORIGIN', '*')
