import logging
import os
from contextlib import contextmanager

import requests

from map2gaf_errors import FileOpenError, RemoteFetchError

logger = logging.getLogger(__name__)

## GO.terms_alt_ids lives under pub/go/doc on the GO ftp host, which also serves it over http
DEFAULT_GO_URL = 'http://ftp.geneontology.org/pub/go/doc/GO.terms_alt_ids'
TIMEOUT = 60


def setup_session():
    """Set up requests session. No retry adapter is mounted, a failed fetch is final."""
    return requests.Session()


def _get(session, url, timeout):
    try:
        return session.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise RemoteFetchError(url, e) from e


def fetch_term_file(url=DEFAULT_GO_URL, dest=None, session=None, timeout=TIMEOUT):
    """
    Download the GO term reference file and write the body verbatim to dest.
    dest defaults to the last path component of the url, in the working directory.
    """
    if dest is None:
        dest = os.path.basename(url.rstrip('/'))
    logger.info(f"Downloading GO term file from {url}")
    if session is None:
        with setup_session() as session:
            response = _get(session, url, timeout)
    else:
        response = _get(session, url, timeout)

    if not response.ok:
        raise RemoteFetchError(url, f"{response.status_code} {response.reason}")

    try:
        with open(dest, 'wb') as out:
            out.write(response.content)
    except OSError as e:
        raise FileOpenError(dest, e.strerror) from e

    logger.debug(f"Saved {len(response.content)} bytes to {dest}")
    return dest


@contextmanager
def reference_file(go_file=None, url=DEFAULT_GO_URL, keep=False, fetch=fetch_term_file):
    """
    Yield a readable GO term reference file path.

    A path given by the caller is used as is and never removed. Otherwise the
    file is fetched with `fetch(url)` and removed once the block finishes
    without error. If the block raises, the downloaded file is left behind.
    """
    if go_file is not None:
        yield go_file
        return

    go_file = fetch(url)
    yield go_file

    if keep:
        logger.info(f"Keeping downloaded GO term file {go_file}")
    elif os.path.exists(go_file):
        os.remove(go_file)
        logger.info(f"Removed downloaded GO term file {go_file}")
