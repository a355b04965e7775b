"""Checkbox grid game: sections of boxes ticked off one by one."""

from __future__ import annotations

from pathlib import Path

from yrepeat.fileio import read_json, write_json_atomic
from yrepeat.models import CheckBox, CheckBoxConfig, new_id
from yrepeat.workspace import checkboxes_path


def _load(root: Path | None) -> tuple[CheckBoxConfig, list[CheckBox]]:
    data = read_json(checkboxes_path(root))
    config = CheckBoxConfig.from_dict(data.get("config") or {})
    boxes = [CheckBox.from_dict(b) for b in (data.get("boxes") or [])]
    boxes.sort(key=lambda b: (b.section_number, b.box_number))
    return config, boxes


def _save(config: CheckBoxConfig, boxes: list[CheckBox], root: Path | None) -> None:
    write_json_atomic(
        checkboxes_path(root),
        {"config": config.to_dict(), "boxes": [b.to_dict() for b in boxes]},
    )


def load_config(root: Path | None = None) -> CheckBoxConfig:
    return _load(root)[0]


def load_boxes(root: Path | None = None) -> list[CheckBox]:
    """All boxes ordered by section, then box number."""
    return _load(root)[1]


def load_sections(root: Path | None = None) -> list[list[CheckBox]]:
    """Boxes grouped per section; empty when the grid was never started."""
    config, boxes = _load(root)
    if not config.has_started:
        return []
    sections: dict[int, list[CheckBox]] = {}
    for box in boxes:
        sections.setdefault(box.section_number, []).append(box)
    return [sections[n] for n in sorted(sections)]


def start_with_configuration(
    number_of_sections: int,
    boxes_per_section: int,
    root: Path | None = None,
) -> list[CheckBox]:
    """Create a fresh grid, replacing any existing one."""
    if number_of_sections <= 0 or boxes_per_section <= 0:
        raise ValueError("Sections and boxes per section must be positive.")
    config = CheckBoxConfig(
        number_of_sections=number_of_sections,
        boxes_per_section=boxes_per_section,
        has_started=True,
    )
    boxes = [
        CheckBox(id=new_id(), section_number=s, box_number=b)
        for s in range(number_of_sections)
        for b in range(boxes_per_section)
    ]
    _save(config, boxes, root)
    return boxes


def toggle_box(box_id: str, root: Path | None = None) -> CheckBox | None:
    config, boxes = _load(root)
    for box in boxes:
        if box.id == box_id:
            box.is_checked = not box.is_checked
            _save(config, boxes, root)
            return box
    return None


def delete_all(root: Path | None = None) -> None:
    """Wipe the grid and go back to the configuration screen."""
    _save(CheckBoxConfig(), [], root)


def total_boxes(boxes: list[CheckBox]) -> int:
    return len(boxes)


def checked_boxes(boxes: list[CheckBox]) -> int:
    return sum(1 for b in boxes if b.is_checked)


def progress(boxes: list[CheckBox]) -> float:
    if not boxes:
        return 0.0
    return checked_boxes(boxes) / len(boxes)
