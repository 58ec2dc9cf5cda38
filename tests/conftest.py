import base64
import io

import pytest
from PIL import Image


def _png_data_uri(width: int, height: int = 4, color=(200, 30, 30)) -> str:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


@pytest.fixture
def png_uri():
    """Factory building a base64 PNG data URI of the requested size."""

    return _png_data_uri
