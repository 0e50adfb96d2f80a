from dotenv import load_dotenv

import os

load_dotenv()

REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", 6379))

project_root = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..")
TEMP_DIR = os.path.join(project_root, "data", "tmp")

SUPPORTED_FILE_TYPES = ("pdf", "docx", "doc", "pptx", "ppt", "xlsx", "xls")

EXTRACTION_QUEUE = "extraction"
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_PDLA_URL = "http://localhost:8080"
DEFAULT_PDLA_TIMEOUT = 900
DEFAULT_CONVERSION_TIMEOUT = 300
DEFAULT_AWS_REGION = "us-east-1"
LIBREOFFICE_BIN = "soffice"
QUEUE_RETRY_DELAY = 5
extraction_workers = 1

USAGE_LIMIT_INDICATOR = "usage limit exceeded"
USAGE_LIMIT_MESSAGE = "Task failed: Usage limit exceeded"
GENERIC_FAILURE_MESSAGE = "Task failed"

FAST_MODELS = ("fast",)
