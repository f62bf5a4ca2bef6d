"""Loads JSON documents from files, standard input, or HTTP(S) URLs.

Remote documents are fetched with `requests`, retrying with exponential
backoff on rate limiting and transient network errors.
"""

import json
import logging
import sys
import time
from pathlib import Path
from typing import Any

import requests

# Initialize a logger for this module.
logger = logging.getLogger(__name__)

STDIN = "-"


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def fetch_json(url: str, timeout: int = 30, retries: int = 3) -> Any:
    """Fetches and decodes a JSON document over HTTP(S).

    This function includes a retry mechanism with exponential backoff to handle
    transient network issues or rate limiting.

    Args:
        url (str): The URL of the document.
        timeout (int): Request timeout in seconds. Defaults to 30.
        retries (int): The number of attempts before giving up; at least one
            request is always made. Defaults to 3.

    Returns:
        Any: The decoded document.

    Raises:
        ValueError: If the document is not found (HTTP 404) or is not valid
            JSON.
        requests.RequestException: If the request fails after all retries
            due to a non-404 HTTP error or a network issue.
    """
    logger.info(f"Fetching document from {url}")
    retries = max(1, retries)

    for attempt in range(retries):
        try:
            response = requests.get(url, timeout=timeout)
            if response.status_code == 429 and attempt < retries - 1:
                sleep_time = 2 ** attempt
                logger.warning(f"Rate limited. Retrying in {sleep_time} seconds...")
                time.sleep(sleep_time)
                continue
            response.raise_for_status()
            return decode_json(response.text, url)
        except requests.exceptions.HTTPError as e:
            if e.response is not None and e.response.status_code == 404:
                raise ValueError(f"Document '{url}' not found.") from e
            if attempt == retries - 1:
                raise
        except requests.exceptions.RequestException as e:
            if attempt == retries - 1:
                raise
            logger.warning(f"Request to {url} failed ({e}), retrying...")
    raise requests.exceptions.RequestException(f"Failed to fetch {url} after {retries} attempts.")


def decode_json(text: str, source: str) -> Any:
    """Decodes `text`, naming `source` in the error if it is not valid JSON."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(
            f"{source} is not valid JSON ({e.msg}) at line {e.lineno} column {e.colno}"
        ) from e


def load_document(source: str, timeout: int = 30, retries: int = 3) -> Any:
    """Loads a JSON document from a path, "-" (stdin), or a URL.

    Args:
        source (str): Where to read the document from.
        timeout (int): Request timeout for URLs, in seconds.
        retries (int): Attempts for URLs.

    Returns:
        Any: The decoded document.

    Raises:
        ValueError: If the document cannot be found or decoded.
        requests.RequestException: If fetching a URL fails.
    """
    if is_url(source):
        return fetch_json(source, timeout=timeout, retries=retries)
    if source == STDIN:
        return decode_json(sys.stdin.read(), "<stdin>")

    path = Path(source)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ValueError(f"File not found: {source}") from e
    except OSError as e:
        raise ValueError(f"Unable to read {source}: {e}") from e
    return decode_json(text, source)
