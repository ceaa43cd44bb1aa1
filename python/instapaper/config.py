"""Configuration management for the Instapaper client."""

import os
import sys
from pathlib import Path
from typing import List, Optional
from dotenv import load_dotenv


def eprint(*args, **kwargs):
    """Print to stderr."""
    print(*args, file=sys.stderr, **kwargs)


def load_config(env_file: Optional[str] = None) -> dict:
    """
    Load configuration from .env file.

    Args:
        env_file: Path to .env file. Defaults to .env in current directory.

    Returns:
        Dictionary of configuration values.
    """
    if env_file is None:
        env_file = ".env"

    env_path = Path(env_file)
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)
        eprint(f"Loaded environment from {env_path.resolve()}")
    else:
        eprint(
            f"Warning: .env file not found at {env_path.resolve()} "
            "- falling back to process env."
        )

    config = {
        # Application credentials
        "consumer_key": os.getenv("INSTAPAPER_CONSUMER_KEY"),
        "consumer_secret": os.getenv("INSTAPAPER_CONSUMER_SECRET"),
        # Stored user tokens, once authenticated
        "oauth_token": os.getenv("INSTAPAPER_OAUTH_TOKEN"),
        "oauth_token_secret": os.getenv("INSTAPAPER_OAUTH_TOKEN_SECRET"),
        # Only needed to obtain the tokens
        "username": os.getenv("INSTAPAPER_USERNAME"),
        "password": os.getenv("INSTAPAPER_PASSWORD"),
    }

    missing = validate_config(config)
    if missing:
        eprint(f"Warning: Instapaper consumer credentials not set: {', '.join(missing)}")

    return config


def validate_config(config: dict, need_token: bool = False) -> List[str]:
    """
    Validate configuration and return list of missing credentials.

    Args:
        config: Configuration dictionary from load_config()
        need_token: If True, require stored OAuth tokens as well

    Returns:
        List of missing variable names (empty if all present).
    """
    missing = []

    consumer_keys = [
        ("consumer_key", "INSTAPAPER_CONSUMER_KEY"),
        ("consumer_secret", "INSTAPAPER_CONSUMER_SECRET"),
    ]
    for key, env_name in consumer_keys:
        if not config.get(key):
            missing.append(env_name)

    if need_token:
        token_keys = [
            ("oauth_token", "INSTAPAPER_OAUTH_TOKEN"),
            ("oauth_token_secret", "INSTAPAPER_OAUTH_TOKEN_SECRET"),
        ]
        for key, env_name in token_keys:
            if not config.get(key):
                missing.append(env_name)

    return missing


def get_consumer_token_instructions() -> str:
    """Return instructions for obtaining an Instapaper consumer key."""
    return """
To get an Instapaper consumer key:
1. Fill out https://www.instapaper.com/main/request_oauth_consumer_token
2. Wait for the key and secret to arrive by email
3. Add them to your .env file:
   INSTAPAPER_CONSUMER_KEY=your_consumer_key
   INSTAPAPER_CONSUMER_SECRET=your_consumer_secret
"""
