"""
Configuration settings for the latency topology service.
"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# API Server Configuration
API_HOST = os.getenv('API_HOST', '0.0.0.0')
API_PORT = int(os.getenv('API_PORT', '8080'))
DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

# Sample Store Configuration
MAX_SAMPLES_PER_PAIR = int(os.getenv('MAX_SAMPLES_PER_PAIR', '50000'))
RETENTION_DAYS = int(os.getenv('RETENTION_DAYS', '30'))
RETENTION_MS = RETENTION_DAYS * 24 * 60 * 60 * 1000
QUERY_LIMIT = int(os.getenv('QUERY_LIMIT', '10000'))
RECENT_PER_PAIR = int(os.getenv('RECENT_PER_PAIR', '100'))
RECENT_LIMIT = int(os.getenv('RECENT_LIMIT', '500'))

# Generator Configuration
GENERATOR_SEED = int(os.getenv('GENERATOR_SEED', '12345'))

# Ingestion Configuration
INGEST_INTERVAL_SECONDS = float(os.getenv('INGEST_INTERVAL_SECONDS', '7'))
INGEST_PAIRS_PER_TICK = int(os.getenv('INGEST_PAIRS_PER_TICK', '10'))
INITIAL_NEIGHBOURS = int(os.getenv('INITIAL_NEIGHBOURS', '5'))

# Globalping Configuration
GLOBALPING_ENABLED = os.getenv('GLOBALPING_ENABLED', 'False').lower() == 'true'
GLOBALPING_API_BASE = os.getenv('GLOBALPING_API_BASE', 'https://api.globalping.io/v1')
GLOBALPING_TIMEOUT_SECONDS = float(os.getenv('GLOBALPING_TIMEOUT_SECONDS', '30'))
GLOBALPING_POLL_SECONDS = float(os.getenv('GLOBALPING_POLL_SECONDS', '2'))

current_config = {
    'api_host': API_HOST,
    'api_port': API_PORT,
    'debug': DEBUG,
    'max_samples_per_pair': MAX_SAMPLES_PER_PAIR,
    'retention_days': RETENTION_DAYS,
    'query_limit': QUERY_LIMIT,
    'recent_per_pair': RECENT_PER_PAIR,
    'recent_limit': RECENT_LIMIT,
    'generator_seed': GENERATOR_SEED,
    'ingest_interval_seconds': INGEST_INTERVAL_SECONDS,
    'ingest_pairs_per_tick': INGEST_PAIRS_PER_TICK,
    'globalping_enabled': GLOBALPING_ENABLED,
}
