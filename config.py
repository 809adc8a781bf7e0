import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))
DATABASE_PATH = os.path.join(BASE_DIR, 'data', 'meetscore.db')

# Relay tables found in historical meet records; neither is authoritative.
RELAY_SCORING_VARIANTS = {
    'whole': {
        2: [5, 3],
        3: [5, 3, 1],
        4: [6, 4, 2],
    },
    'fractional': {
        2: [1.25, 0.75],
        3: [1.25, 0.75, 0.25],
        4: [1.5, 1, 0.5],
    },
}


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'change-me')
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', f"sqlite:///{DATABASE_PATH}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    DEBUG = True
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    INDIVIDUAL_SCORING = {
        2: [5, 3, 1],
        3: [5, 3, 2, 1],
        4: [6, 4, 3, 2, 1],
    }
    CHAMPIONSHIP_SCORING = [10, 8, 6, 4, 2, 1]
    CHAMPIONSHIP_MIN_TEAMS = 5

    RELAY_SCORING_VARIANT = os.environ.get('RELAY_SCORING_VARIANT', 'whole')
    RELAY_SCORING_VARIANTS = RELAY_SCORING_VARIANTS
    # explicit relay table; overrides RELAY_SCORING_VARIANT when set
    RELAY_SCORING = None
