# accounting/api/renderers.py

import json

from rest_framework.renderers import BaseRenderer
from rest_framework.utils.encoders import JSONEncoder


class CSVTextRenderer(BaseRenderer):
    """
    Serves pre-rendered CSV text (?format=csv).
    Non-text payloads (error bodies) are emitted as JSON.
    """

    media_type = "text/csv"
    format = "csv"
    charset = "utf-8"

    def render(self, data, accepted_media_type=None, renderer_context=None):
        if data is None:
            return b""
        if isinstance(data, str):
            return data.encode(self.charset)
        return json.dumps(data, cls=JSONEncoder, ensure_ascii=False).encode(self.charset)
