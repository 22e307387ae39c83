#!/usr/bin/env python3
"""
Dictionary lookup client.

Queries the dictionary JSON API once per headword. The response shape is
not trusted (fields are read through field_extractor), and failures never
propagate: a failed lookup returns None so enrichment can continue with
default values.

Usage:
    uv run python -m vocabenrich.lookup apple
"""

import argparse
import json
import logging
import sys
from typing import Any, Dict, Optional

import requests

from vocabenrich.config import DEFAULT_ENDPOINT, USER_AGENT

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)


class LookupClient:
    """
    Thin wrapper around a requests session for dictionary queries.

    Usage:
        with LookupClient() as client:
            data = client.fetch("apple")
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = 15.0,
        user_agent: str = USER_AGENT,
        session: Optional[requests.Session] = None,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
            "User-Agent": user_agent,
        })

    def fetch(self, headword: str) -> Optional[Dict[str, Any]]:
        """
        Look up one headword.

        Args:
            headword: Word or phrase to query

        Returns:
            Decoded JSON response, or None if the request failed
        """
        try:
            response = self.session.get(
                self.endpoint,
                params={"q": headword},
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()

        except requests.RequestException as e:
            logger.error(f"Failed to fetch {headword!r}: {e}")
            return None
        except ValueError as e:
            # Body was not valid JSON
            logger.error(f"Failed to decode response for {headword!r}: {e}")
            return None

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def main():
    parser = argparse.ArgumentParser(description='Query the dictionary API for one word')
    parser.add_argument('headword', help='Word to look up')
    parser.add_argument('--endpoint', default=DEFAULT_ENDPOINT,
                        help=f'Lookup endpoint (default: {DEFAULT_ENDPOINT})')
    args = parser.parse_args()

    with LookupClient(endpoint=args.endpoint) as client:
        data = client.fetch(args.headword)

    if data is None:
        sys.exit(1)
    print(json.dumps(data, indent=2, ensure_ascii=False))


if __name__ == '__main__':
    main()
