#!/usr/bin/env python3
"""
CLI script to scrape image results without going through the HTTP API.

Usage:
    python -m scripts.search_images --query "red panda" --count 10
"""

import argparse
import asyncio
import json
import logging
from typing import Any, Dict, List

from img_search_api.core.config import settings
from img_search_api.services.search.image_search_service import ImageSearchService
from img_search_api.utils.error_handling import CaptchaRetriesExhaustedError, ScrapingError

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def _format_results_for_json(images) -> List[Dict[str, Any]]:
    return [image.model_dump() for image in images]

def search_images(query: str, start: int = 0, count: int = 30, output_format: str = 'text') -> List[Dict[str, Any]]:
    """
    Scrape images using the search service.

    Args:
        query: Text query
        start: Pagination offset
        count: Number of images to return
        output_format: Output format ('text' or 'json')

    Returns:
        List of image dictionaries
    """
    service = ImageSearchService.from_settings(settings)

    logger.info(f"Searching for: {query}")
    images = asyncio.run(service.search(query, start=start, count=count))
    results = _format_results_for_json(images)

    if not results:
        print("No images found for the query.")
        return []

    if output_format == 'text':
        print(f"\n{len(results)} images for query: '{query}'")
        print("-" * 60)
        for i, result in enumerate(results):
            print(f"{i+1}. Original:  {result['original_url']}")
            print(f"   Thumbnail: {result['thumbnail_url']}")
        print("-" * 60)
    else:
        print(json.dumps(results, indent=2))

    return results

def main() -> int:
    """Main entry point for the script."""
    parser = argparse.ArgumentParser(description='Scrape image search results')
    parser.add_argument('--query', type=str, required=True,
                        help='Text query to search for')
    parser.add_argument('--start', type=int, default=settings.DEFAULT_START,
                        help='Pagination offset')
    parser.add_argument('--count', type=int, default=settings.DEFAULT_COUNT,
                        help='Number of images to return')
    parser.add_argument('--format', choices=['text', 'json'], default='text',
                        help='Output format')
    parser.add_argument('--output', type=str, default=None,
                        help='Output JSON file path')
    parser.add_argument('--headful', action='store_true',
                        help='Show the browser window (debugging)')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable verbose output')

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    if args.headful:
        settings.BROWSER_HEADLESS = False

    try:
        results = search_images(args.query, args.start, args.count, args.format)
    except CaptchaRetriesExhaustedError as e:
        logger.error(f"Too many CAPTCHA challenges: {e}")
        return 2
    except ScrapingError as e:
        logger.error(f"Image search failed: {e}")
        return 1

    if args.output:
        if results:
            try:
                with open(args.output, 'w') as f:
                    json.dump(results, f, indent=2)
                logger.info(f"Results saved to {args.output}")
            except IOError as e:
                logger.error(f"Failed to write results to {args.output}: {e}")
        else:
            logger.warning(f"No results to save to {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
