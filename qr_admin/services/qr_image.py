from __future__ import annotations

import asyncio
import base64
import io

import qrcode

PNG_DATA_URI_PREFIX = "data:image/png;base64,"


def render_png(url: str, box_size: int = 10, border: int = 4) -> bytes:
    qr = qrcode.QRCode(box_size=box_size, border=border)
    qr.add_data(url)
    qr.make(fit=True)
    img = qr.make_image()
    buffer = io.BytesIO()
    img.save(buffer)
    return buffer.getvalue()


class QRImageEncoder:
    def __init__(self, box_size: int = 10, border: int = 4):
        self.box_size = box_size
        self.border = border

    def to_data_uri(self, url: str) -> str:
        png = render_png(url, box_size=self.box_size, border=self.border)
        return PNG_DATA_URI_PREFIX + base64.b64encode(png).decode("ascii")

    async def encode(self, url: str) -> str:
        return await asyncio.to_thread(self.to_data_uri, url)
