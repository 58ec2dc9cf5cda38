import argparse
import logging
import os
from typing import List

from tqdm import tqdm

from image_zoom import DEFAULT_MODIFIER
from view_utils import MODIFIER_FLAGS
from window import run_interface


MARKDOWN_EXTENSIONS = {
    ".md",
    ".markdown",
    ".txt",
}


def collect_documents(paths: List[str]) -> List[str]:
    """Expand directories and drop paths that cannot be opened.

    Args:
        paths (List[str]): Files or directories given on the command line.

    Returns:
        List[str]: Readable markdown files, in command line order.
    """
    documents = []
    for path in tqdm(paths, desc="Collecting documents"):
        if os.path.isdir(path):
            documents.extend(
                os.path.join(path, name)
                for name in sorted(os.listdir(path))
                if os.path.splitext(name)[1].lower() in MARKDOWN_EXTENSIONS
            )
        elif os.path.isfile(path):
            documents.append(path)
        else:
            logging.warning("Document missing: %s", path)
    return documents


def main():
    parser = argparse.ArgumentParser(description="Markdown image mouse wheel zoom")
    parser.add_argument("paths", nargs="+", help="Markdown files or directories to open")
    parser.add_argument(
        "--modifier",
        choices=sorted(MODIFIER_FLAGS),
        default=DEFAULT_MODIFIER,
        help="Key to hold while scrolling over an image to resize it",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level))

    documents = collect_documents(args.paths)
    if documents:
        run_interface(documents, args.modifier)
    else:
        logging.error("No documents to open")


if __name__ == "__main__":
    main()
