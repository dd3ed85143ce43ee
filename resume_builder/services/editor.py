"""Pure editing operations on resume documents.

Every operation takes a resume and returns a new resume with only the
addressed node replaced; untouched sections and items are shared with the
input. Operations never raise for unknown section or item ids, out of range
point indexes or non-positive style values: they return the input unchanged.
"""

import uuid
from enum import Enum
from typing import Annotated, Callable, List, Literal, Optional, Union
from pydantic import BaseModel, Field, TypeAdapter
from resume_builder.models.resume_models import (
    Link,
    Resume,
    ResumeStyle,
    Section,
    SectionItem,
    SectionTheme,
    ThemeCategory,
)


NEW_POINT_PLACEHOLDER = "New bullet point"


class ProfileField(str, Enum):
    """Editable profile fields."""

    NAME = "name"
    ROLE = "role"
    INTRO = "intro"
    IMAGE = "image"


class ThemeField(str, Enum):
    """Editable theme scale factors."""

    HEADER_SIZE = "headerSize"
    ITEM_TITLE_SIZE = "itemTitleSize"
    SUBTITLE_SIZE = "subtitleSize"
    TEXT_SIZE = "textSize"
    SPACING = "spacing"


class TextFieldUpdate(BaseModel):
    """Set one of the free-text fields of an item."""

    field: Literal["title", "subtitle", "date", "description", "location"]
    value: Optional[str] = None


class StringListUpdate(BaseModel):
    """Replace one of the string list fields of an item."""

    field: Literal["techStack", "points", "images"]
    value: List[str]


class LinksUpdate(BaseModel):
    """Replace the links of an item."""

    field: Literal["links"]
    value: List[Link]


class SubItemsUpdate(BaseModel):
    """Replace the nested items of an item."""

    field: Literal["subItems"]
    value: List[SectionItem]


ItemFieldUpdate = Annotated[
    Union[TextFieldUpdate, StringListUpdate, LinksUpdate, SubItemsUpdate],
    Field(discriminator="field"),
]

_item_update_adapter = TypeAdapter(ItemFieldUpdate)


def parse_item_update(data: dict) -> ItemFieldUpdate:
    """
    Build an item field update from a ``{"field": ..., "value": ...}`` mapping.

    Raises:
        pydantic.ValidationError: If the field is unknown or the value has the wrong type
    """
    return _item_update_adapter.validate_python(data)


def new_item_id() -> str:
    """Fresh id for a section item."""
    return uuid.uuid4().hex[:12]


def empty_item() -> SectionItem:
    """A new item with empty fields."""
    return SectionItem(
        id=new_item_id(),
        title="",
        subtitle="",
        date="",
        description="",
        points=[],
    )


# Profile

def set_profile_field(resume: Resume, field: ProfileField, value: Optional[str]) -> Resume:
    """Set one profile field. A None image removes the image."""
    field = ProfileField(field)
    if field == ProfileField.IMAGE:
        value = value or None
    else:
        value = value or ""
    profile = resume.profile.model_copy(update={field.value: value})
    return resume.model_copy(update={"profile": profile})


def set_contact_field(resume: Resume, key: str, value: Optional[str]) -> Resume:
    """Set one contact channel, e.g. email or github."""
    contact = dict(resume.profile.contact)
    contact[key] = value
    profile = resume.profile.model_copy(update={"contact": contact})
    return resume.model_copy(update={"profile": profile})


# Sections

def _map_section(
    resume: Resume,
    section_id: str,
    change: Callable[[Section], Section]
) -> Resume:
    changed = False
    sections = []
    for section in resume.sections:
        if section.id == section_id:
            new_section = change(section)
            changed = changed or new_section is not section
            section = new_section
        sections.append(section)
    if not changed:
        return resume
    return resume.model_copy(update={"sections": sections})


def set_section_title(resume: Resume, section_id: str, title: str) -> Resume:
    """Rename a section."""
    return _map_section(
        resume, section_id,
        lambda section: section.model_copy(update={"title": title})
    )


def toggle_section_visibility(resume: Resume, section_id: str) -> Resume:
    """Show or hide a section. Undefined visibility counts as visible."""
    return _map_section(
        resume, section_id,
        lambda section: section.model_copy(update={"visible": not section.is_visible})
    )


def move_section(resume: Resume, active_id: str, over_id: str) -> Resume:
    """
    Move a section to the position of another one.

    Uses array-move semantics: the moved section is removed from its old
    index and inserted at the target's index; sections in between shift.

    Args:
        resume: Resume to edit
        active_id: Id of the section being moved
        over_id: Id of the section whose position it takes

    Returns:
        Resume: Resume with reordered sections
    """
    ids = [section.id for section in resume.sections]
    if active_id == over_id or active_id not in ids or over_id not in ids:
        return resume

    sections = list(resume.sections)
    moved = sections.pop(ids.index(active_id))
    sections.insert(ids.index(over_id), moved)
    return resume.model_copy(update={"sections": sections})


# Items

def _map_items(
    section: Section,
    item_id: str,
    change: Callable[[SectionItem], SectionItem]
) -> Section:
    changed = False
    items = []
    for item in section.items:
        if item.id == item_id:
            new_item = change(item)
            changed = changed or new_item is not item
            item = new_item
        items.append(item)
    if not changed:
        return section
    return section.model_copy(update={"items": items})


def _map_item(
    resume: Resume,
    section_id: str,
    item_id: str,
    change: Callable[[SectionItem], SectionItem]
) -> Resume:
    return _map_section(
        resume, section_id,
        lambda section: _map_items(section, item_id, change)
    )


def add_section_item(resume: Resume, section_id: str) -> Resume:
    """Prepend a new empty item to a section."""
    return _map_section(
        resume, section_id,
        lambda section: section.model_copy(update={"items": [empty_item()] + section.items})
    )


def remove_section_item(resume: Resume, section_id: str, item_id: str) -> Resume:
    """Remove an item from a section."""
    def remove(section: Section) -> Section:
        items = [item for item in section.items if item.id != item_id]
        if len(items) == len(section.items):
            return section
        return section.model_copy(update={"items": items})

    return _map_section(resume, section_id, remove)


def update_section_item(
    resume: Resume,
    section_id: str,
    item_id: str,
    update: ItemFieldUpdate
) -> Resume:
    """
    Set one field of an item.

    Args:
        resume: Resume to edit
        section_id: Section holding the item
        item_id: Item to edit
        update: Field and new value

    Returns:
        Resume: Edited resume
    """
    return _map_item(
        resume, section_id, item_id,
        lambda item: item.model_copy(update={update.field: update.value})
    )


def add_sub_item(resume: Resume, section_id: str, item_id: str) -> Resume:
    """Append a new empty nested item under an item."""
    return _map_item(
        resume, section_id, item_id,
        lambda item: item.model_copy(update={"subItems": (item.subItems or []) + [empty_item()]})
    )


def remove_sub_item(resume: Resume, section_id: str, item_id: str, sub_item_id: str) -> Resume:
    """Remove a nested item from an item."""
    def remove(item: SectionItem) -> SectionItem:
        sub_items = [sub for sub in item.subItems or [] if sub.id != sub_item_id]
        if len(sub_items) == len(item.subItems or []):
            return item
        return item.model_copy(update={"subItems": sub_items})

    return _map_item(resume, section_id, item_id, remove)


# Points

def add_point(
    resume: Resume,
    section_id: str,
    item_id: str,
    text: str = NEW_POINT_PLACEHOLDER
) -> Resume:
    """Append a bullet point to an item."""
    return _map_item(
        resume, section_id, item_id,
        lambda item: item.model_copy(update={"points": (item.points or []) + [text]})
    )


def remove_point(resume: Resume, section_id: str, item_id: str, index: int) -> Resume:
    """Delete the bullet point at ``index``."""
    def remove(item: SectionItem) -> SectionItem:
        points = item.points or []
        if not 0 <= index < len(points):
            return item
        return item.model_copy(update={"points": points[:index] + points[index + 1:]})

    return _map_item(resume, section_id, item_id, remove)


def update_point(
    resume: Resume,
    section_id: str,
    item_id: str,
    index: int,
    value: str
) -> Resume:
    """Replace the bullet point at ``index``."""
    def replace(item: SectionItem) -> SectionItem:
        points = item.points or []
        if not 0 <= index < len(points):
            return item
        new_points = list(points)
        new_points[index] = value
        return item.model_copy(update={"points": new_points})

    return _map_item(resume, section_id, item_id, replace)


# Styles

def _with_styles(resume: Resume, styles: ResumeStyle) -> Resume:
    return resume.model_copy(update={"styles": styles})


def set_theme_field(
    resume: Resume,
    category: ThemeCategory,
    field: ThemeField,
    value: float
) -> Resume:
    """
    Set one scale factor of a category's theme.

    A category without its own theme starts from the theme it currently
    resolves to.
    """
    if value <= 0:
        return resume
    category = ThemeCategory(category)
    field = ThemeField(field)

    theme = dict(resume.styles.theme)
    theme[category] = resume.styles.resolve(category).model_copy(update={field.value: value})
    return _with_styles(resume, resume.styles.model_copy(update={"theme": theme}))


def apply_theme_to_all(resume: Resume, category: ThemeCategory) -> Resume:
    """Copy one category's theme to all six categories."""
    source: SectionTheme = resume.styles.resolve(category)
    theme = {target: source.model_copy() for target in ThemeCategory}
    return _with_styles(resume, resume.styles.model_copy(update={"theme": theme}))


def set_line_height(resume: Resume, value: float) -> Resume:
    """Set the global line height."""
    if value <= 0:
        return resume
    return _with_styles(resume, resume.styles.model_copy(update={"lineHeight": value}))


def set_section_spacing(resume: Resume, value: float) -> Resume:
    """Set the global spacing between sections."""
    if value <= 0:
        return resume
    return _with_styles(resume, resume.styles.model_copy(update={"sectionSpacing": value}))
