import os
from pathlib import Path
from datetime import timedelta
from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv()

# BASE DIR
BASE_DIR = Path(__file__).resolve().parent.parent

# SECURITY
SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "your-default-secret-key")
DEBUG = os.getenv("DJANGO_DEBUG", "True") == "True"
ALLOWED_HOSTS = os.getenv("DJANGO_ALLOWED_HOSTS", "127.0.0.1,localhost,testserver").split(",")

# APPLICATIONS
INSTALLED_APPS = [
    # Django default apps
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # Third-party apps
    'rest_framework',
    'corsheaders',
    'django_filters',
    'rest_framework_simplejwt',

    # Your apps
    'users.apps.UsersConfig',
    'investments.apps.InvestmentsConfig',
    'wallet.apps.WalletConfig',
]

# MIDDLEWARE
MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

# URLS
ROOT_URLCONF = 'backend.urls'

# TEMPLATES
TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [BASE_DIR / 'templates'],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

# WSGI / ASGI
WSGI_APPLICATION = 'backend.wsgi.application'
ASGI_APPLICATION = 'backend.asgi.application'

# DATABASE (SQLite default, replace with PostgreSQL if needed)
DATABASES = {
    'default': {
        'ENGINE': os.getenv("DB_ENGINE", "django.db.backends.sqlite3"),
        'NAME': os.getenv("DB_NAME", BASE_DIR / "db.sqlite3"),
        'USER': os.getenv("DB_USER", ""),
        'PASSWORD': os.getenv("DB_PASSWORD", ""),
        'HOST': os.getenv("DB_HOST", ""),
        'PORT': os.getenv("DB_PORT", ""),
    }
}

# AUTHENTICATION
AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator', 'OPTIONS': {'min_length': 6}},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
]

AUTH_USER_MODEL = 'users.User'  # custom user model

# INTERNATIONALIZATION
LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

# STATIC & MEDIA
STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

# CORS
CORS_ALLOW_ALL_ORIGINS = True  # for development; lock down in production

# REST FRAMEWORK
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': (
        'rest_framework_simplejwt.authentication.JWTAuthentication',
    ),
    'DEFAULT_PERMISSION_CLASSES': (
        'rest_framework.permissions.IsAuthenticated',
    ),
    'DEFAULT_FILTER_BACKENDS': ['django_filters.rest_framework.DjangoFilterBackend'],
    'DEFAULT_PAGINATION_CLASS': 'rest_framework.pagination.PageNumberPagination',
    'PAGE_SIZE': 20,
}

# SIMPLE JWT
SIMPLE_JWT = {
    'ACCESS_TOKEN_LIFETIME': timedelta(minutes=int(os.getenv("JWT_ACCESS_LIFETIME", 60))),
    'REFRESH_TOKEN_LIFETIME': timedelta(days=int(os.getenv("JWT_REFRESH_LIFETIME", 1))),
    'AUTH_HEADER_TYPES': ('Bearer',),
}

# DEFAULT AUTO FIELD
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# INVESTMENTS
# Every plan pays out PAYOUT_MULTIPLIER x principal at maturity.
PAYOUT_MULTIPLIER = 2

# Upper bounds on creation input; the payout must fit the 20-digit money columns.
INVESTMENT_MAX_DURATION_DAYS = int(os.getenv("INVESTMENT_MAX_DURATION_DAYS", 3650))
INVESTMENT_MAX_AMOUNT = os.getenv("INVESTMENT_MAX_AMOUNT", "1000000000")

INVESTMENT_PLANS = {
    "starter": {"name": "Starter", "duration_days": 7, "min_amount": 50},
    "growth": {"name": "Growth", "duration_days": 14, "min_amount": 200},
    "premium": {"name": "Premium", "duration_days": 30, "min_amount": 1000},
}

# Polling interval of the accrual scheduler. An investment that matures between
# two passes is settled by the next one.
ACCRUAL_INTERVAL_MINUTES = int(os.getenv("ACCRUAL_INTERVAL_MINUTES", 30))
ACCRUAL_SCHEDULER_ENABLED = os.getenv("ACCRUAL_SCHEDULER_ENABLED", "False") == "True"

# Idempotent store updates are retried this many times; inserts never are.
STORE_UPDATE_RETRIES = int(os.getenv("STORE_UPDATE_RETRIES", 3))

# REFERRALS
REFERRAL_COMMISSION_RATE = os.getenv("REFERRAL_COMMISSION_RATE", "0.20")

# LOGGING
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'standard': {
            'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'standard',
        },
        'accrual_file': {
            'class': 'logging.FileHandler',
            'filename': os.getenv("ACCRUAL_LOG_FILE", BASE_DIR / "accrual.log"),
            'formatter': 'standard',
            'delay': True,
        },
    },
    'loggers': {
        'investments': {
            'handlers': ['console', 'accrual_file'],
            'level': os.getenv("ACCRUAL_LOG_LEVEL", "INFO"),
        },
        'users': {
            'handlers': ['console'],
            'level': 'INFO',
        },
        'wallet': {
            'handlers': ['console'],
            'level': 'INFO',
        },
    },
}
