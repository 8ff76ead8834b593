"""
Rich menu setup for the owner's LINE chat.

    dropmate-richmenu setup [--image richmenu.png] [--locker-id LOCKER001]
    dropmate-richmenu list
    dropmate-richmenu clean

The image must be PNG or JPEG, 2500x843 or 2500x1686, at most 1 MB.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from dropmate.infrastructure.messaging.line import LineApiError, LineMessagingClient

logger = logging.getLogger("dropmate.richmenu")

DEFAULT_MENU_PATH = Path(__file__).resolve().parent / "richmenu.yaml"
MAX_IMAGE_BYTES = 1024 * 1024

_MIME_BY_EXT = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
}


class RichMenuSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    line_channel_access_token: str
    default_locker_id: str = "LOCKER001"
    line_api_base_url: str = "https://api.line.me/v2/bot"
    line_data_api_base_url: str = "https://api-data.line.me/v2/bot"


class ImageRejected(ValueError):
    pass


def detect_mime(path: Path) -> str:
    mime = _MIME_BY_EXT.get(path.suffix.lower())
    if mime is None:
        raise ImageRejected("รองรับเฉพาะ .png หรือ .jpg เท่านั้น")
    return mime


def read_image(path: Path) -> tuple[bytes, str]:
    mime = detect_mime(path)
    content = path.read_bytes()
    if len(content) > MAX_IMAGE_BYTES:
        size_kb = round(len(content) / 1024)
        raise ImageRejected(
            f"ไฟล์ใหญ่เกินไป ({size_kb} KB), บีบอัดให้ ≤ 1024 KB และขนาดภาพ 2500x843/2500x1686"
        )
    return content, mime


def load_menu_definition(path: Path, locker_id: str) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        menu = yaml.safe_load(f)

    for area in menu.get("areas", []):
        action = area.get("action", {})
        if "data" in action:
            action["data"] = action["data"].replace("{locker_id}", locker_id)
    return menu


def setup(client: LineMessagingClient, *, image: Path, menu: dict[str, Any]) -> str:
    # Validate the image before creating anything on LINE
    content, mime = read_image(image)

    logger.info("Creating rich menu…")
    rich_menu_id = client.create_rich_menu(menu)
    logger.info("Rich menu id: %s", rich_menu_id)

    logger.info("Uploading image %s (%s)…", image, mime)
    client.upload_rich_menu_image(rich_menu_id, content, mime)

    logger.info("Setting as default…")
    client.set_default_rich_menu(rich_menu_id)
    return rich_menu_id


def clean(client: LineMessagingClient) -> int:
    menus = client.list_rich_menus()
    for menu in menus:
        logger.info("Deleting %s %s", menu.get("richMenuId"), menu.get("name"))
        client.delete_rich_menu(menu["richMenuId"])
    return len(menus)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dropmate-richmenu", description="Manage the owner's LINE rich menu")
    parser.add_argument("command", nargs="?", default="setup", choices=["setup", "list", "clean"])
    parser.add_argument("--image", type=Path, default=Path("./richmenu.png"))
    parser.add_argument("--menu", type=Path, default=DEFAULT_MENU_PATH, help="YAML rich menu definition")
    parser.add_argument("--locker-id", default=None, help="locker targeted by the postbacks")
    return parser


def main(argv: list[str] | None = None, *, client: LineMessagingClient | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    args = build_parser().parse_args(argv)

    try:
        settings = RichMenuSettings()
    except ValidationError:
        logger.error("❌ Missing LINE_CHANNEL_ACCESS_TOKEN")
        return 1

    client = client or LineMessagingClient(
        access_token=settings.line_channel_access_token,
        api_base_url=settings.line_api_base_url,
        data_api_base_url=settings.line_data_api_base_url,
    )

    try:
        if args.command == "list":
            for menu in client.list_rich_menus():
                logger.info("%s %s %s", menu.get("richMenuId"), menu.get("name"), menu.get("size"))
            return 0

        if args.command == "clean":
            deleted = clean(client)
            logger.info("✅ Cleaned %d rich menu(s).", deleted)
            return 0

        menu = load_menu_definition(args.menu, args.locker_id or settings.default_locker_id)
        setup(client, image=args.image, menu=menu)
        logger.info("✅ Done. Rich menu is set as default.")
        return 0
    except (LineApiError, ImageRejected, OSError) as e:
        logger.error("❌ Error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
