from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from dropmate.infrastructure.messaging.line import LineApiError
from dropmate.tools.richmenu import (
    DEFAULT_MENU_PATH,
    MAX_IMAGE_BYTES,
    ImageRejected,
    detect_mime,
    load_menu_definition,
    main,
    read_image,
)


class _FakeLine:
    def __init__(self, menus: list[dict[str, Any]] | None = None, fail: bool = False) -> None:
        self.menus = menus or []
        self.fail = fail
        self.calls: list[tuple] = []

    def create_rich_menu(self, body: dict[str, Any]) -> str:
        if self.fail:
            raise LineApiError("POST richmenu -> 401", status_code=401)
        self.calls.append(("create", body))
        return "rm-new"

    def upload_rich_menu_image(self, rich_menu_id: str, content: bytes, content_type: str) -> None:
        self.calls.append(("upload", rich_menu_id, content, content_type))

    def set_default_rich_menu(self, rich_menu_id: str) -> None:
        self.calls.append(("default", rich_menu_id))

    def list_rich_menus(self) -> list[dict[str, Any]]:
        return list(self.menus)

    def delete_rich_menu(self, rich_menu_id: str) -> None:
        self.calls.append(("delete", rich_menu_id))


@pytest.fixture()
def line_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LINE_CHANNEL_ACCESS_TOKEN", "tok")
    monkeypatch.setenv("DEFAULT_LOCKER_ID", "LOCKER042")
    return tmp_path


@pytest.mark.parametrize(
    "name, mime",
    [("menu.png", "image/png"), ("menu.JPG", "image/jpeg"), ("menu.jpeg", "image/jpeg")],
)
def test_detect_mime(name: str, mime: str) -> None:
    assert detect_mime(Path(name)) == mime


@pytest.mark.parametrize("name", ["menu.gif", "menu", "menu.png.txt"])
def test_other_image_types_are_rejected(name: str) -> None:
    with pytest.raises(ImageRejected):
        detect_mime(Path(name))


def test_image_over_one_megabyte_is_rejected(tmp_path: Path) -> None:
    ok = tmp_path / "ok.png"
    ok.write_bytes(b"x" * MAX_IMAGE_BYTES)
    big = tmp_path / "big.png"
    big.write_bytes(b"x" * (MAX_IMAGE_BYTES + 1))

    assert read_image(ok) == (b"x" * MAX_IMAGE_BYTES, "image/png")
    with pytest.raises(ImageRejected):
        read_image(big)


def test_menu_definition_targets_the_locker() -> None:
    menu = load_menu_definition(DEFAULT_MENU_PATH, "L7")

    assert menu["size"] == {"width": 2500, "height": 843}
    assert [a["action"]["data"] for a in menu["areas"]] == [
        "action=enable&locker_id=L7",
        "action=disable&locker_id=L7",
        "action=status&locker_id=L7",
        "action=unlock&locker_id=L7",
    ]


def test_setup_creates_uploads_and_sets_default(line_env: Path) -> None:
    (line_env / "richmenu.png").write_bytes(b"\x89PNG....")
    line = _FakeLine()

    assert main(["setup"], client=line) == 0

    kinds = [c[0] for c in line.calls]
    assert kinds == ["create", "upload", "default"]
    body = line.calls[0][1]
    assert body["areas"][0]["action"]["data"] == "action=enable&locker_id=LOCKER042"
    assert line.calls[1][1:] == ("rm-new", b"\x89PNG....", "image/png")


def test_setup_with_explicit_locker_and_image(line_env: Path) -> None:
    image = line_env / "custom.jpg"
    image.write_bytes(b"jpeg")
    line = _FakeLine()

    assert main(["setup", "--image", str(image), "--locker-id", "L9"], client=line) == 0
    assert line.calls[0][1]["areas"][3]["action"]["data"] == "action=unlock&locker_id=L9"
    assert line.calls[1][3] == "image/jpeg"


def test_setup_checks_image_before_calling_line(line_env: Path) -> None:
    (line_env / "richmenu.png").write_bytes(b"x" * (MAX_IMAGE_BYTES + 1))
    line = _FakeLine()

    assert main(["setup"], client=line) == 1
    assert line.calls == []


def test_missing_image_fails(line_env: Path) -> None:
    assert main(["setup"], client=_FakeLine()) == 1


def test_line_error_fails(line_env: Path) -> None:
    (line_env / "richmenu.png").write_bytes(b"png")
    assert main(["setup"], client=_FakeLine(fail=True)) == 1


def test_list_and_clean(line_env: Path) -> None:
    line = _FakeLine(menus=[{"richMenuId": "a", "name": "old"}, {"richMenuId": "b", "name": "older"}])

    assert main(["list"], client=line) == 0
    assert line.calls == []

    assert main(["clean"], client=line) == 0
    assert line.calls == [("delete", "a"), ("delete", "b")]


def test_missing_token_fails(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("LINE_CHANNEL_ACCESS_TOKEN", raising=False)

    assert main(["list"], client=_FakeLine()) == 1
