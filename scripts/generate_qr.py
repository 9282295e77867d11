#!/usr/bin/env python3
import argparse
import os

from qr_admin.services.enrichment import scan_url
from qr_admin.services.qr_image import render_png


def main() -> None:
    parser = argparse.ArgumentParser(description="Write the scan QR code of a stored QR code as PNG")
    parser.add_argument("--qr-id", type=int, required=True)
    parser.add_argument("--app-url", default=os.getenv("APP_URL", "http://localhost:8000"))
    parser.add_argument("--box-size", type=int, default=10)
    parser.add_argument("--border", type=int, default=4)
    parser.add_argument("--out", default=None)
    args = parser.parse_args()

    url = scan_url(args.app_url, args.qr_id)
    out = args.out or f"qrcode-{args.qr_id}.png"
    with open(out, "wb") as fh:
        fh.write(render_png(url, box_size=args.box_size, border=args.border))
    print(f"Wrote QR image for {url} to {out}")


if __name__ == "__main__":
    main()
