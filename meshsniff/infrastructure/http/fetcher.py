import requests

from meshsniff.utils.logger import logger

USER_AGENT = "MeshSniff/0.1 (+deep-scan)"
CHUNK_SIZE = 512


class PrefixFetchError(Exception):
    """The leading bytes of a resource could not be retrieved."""


class RangeFetcher:
    """
    Fetches at most `limit` leading bytes of a URL with a Range request.
    Servers that ignore Range still get cut off after `limit` bytes because
    the body is streamed and the connection closed early.
    """
    def __init__(self, timeout: float = 5.0, session: requests.Session = None):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': USER_AGENT})

    def fetch_prefix(self, url: str, limit: int = 512) -> bytes:
        headers = {'Range': f'bytes=0-{limit - 1}'}
        try:
            response = self.session.get(url, headers=headers, stream=True, timeout=self.timeout)
        except requests.RequestException as e:
            raise PrefixFetchError(f"request failed: {e}") from e

        try:
            if not response.ok and response.status_code != 206:
                raise PrefixFetchError(f"HTTP {response.status_code}")

            buffer = bytearray()
            for chunk in response.iter_content(chunk_size=min(CHUNK_SIZE, limit)):
                if chunk:
                    buffer.extend(chunk)
                if len(buffer) >= limit:
                    break
        except requests.RequestException as e:
            raise PrefixFetchError(f"read failed: {e}") from e
        finally:
            response.close()

        if response.status_code == 200:
            logger.debug(f"Server ignored Range for {url}; truncated body to {limit} bytes")
        return bytes(buffer[:limit])

    def close(self):
        self.session.close()
