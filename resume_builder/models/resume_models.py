"""Pydantic models for resume documents."""

import json
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple
from pydantic import BaseModel, Field


MAX_ITEM_DEPTH = 8


class SectionType(str, Enum):
    """Supported section types."""

    EXPERIENCE = "experience"
    PROJECT = "project"
    EDUCATION = "education"
    ACTIVITY = "activity"
    CUSTOM = "custom"


class ThemeCategory(str, Enum):
    """Style buckets, one per section type plus global and profile."""

    GLOBAL = "global"
    PROFILE = "profile"
    EXPERIENCE = "experience"
    PROJECT = "project"
    EDUCATION = "education"
    ACTIVITY = "activity"


# custom sections have no bucket of their own and use the global one
SECTION_THEME_CATEGORY: Dict[SectionType, ThemeCategory] = {
    SectionType.EXPERIENCE: ThemeCategory.EXPERIENCE,
    SectionType.PROJECT: ThemeCategory.PROJECT,
    SectionType.EDUCATION: ThemeCategory.EDUCATION,
    SectionType.ACTIVITY: ThemeCategory.ACTIVITY,
    SectionType.CUSTOM: ThemeCategory.GLOBAL,
}


class SectionTheme(BaseModel):
    """Size and spacing scale factors for one theme category."""

    headerSize: float = Field(..., gt=0, description="Name or section title size")
    itemTitleSize: float = Field(..., gt=0, description="Role or job title size")
    subtitleSize: float = Field(..., gt=0, description="Company/date size")
    textSize: float = Field(..., gt=0, description="Description/intro size")
    spacing: float = Field(..., gt=0, description="Gap scale")


def default_theme() -> SectionTheme:
    """Theme used by global and every section category."""
    return SectionTheme(
        headerSize=1.5,
        itemTitleSize=1.25,
        subtitleSize=1,
        textSize=0.95,
        spacing=1,
    )


def default_profile_theme() -> SectionTheme:
    """Theme for the profile header, tuned for emphasis."""
    return SectionTheme(
        headerSize=2.75,
        itemTitleSize=1.1,
        subtitleSize=0.9,
        textSize=1.0,
        spacing=1,
    )


def default_theme_map() -> Dict[ThemeCategory, SectionTheme]:
    """Build a fresh theme mapping covering all six categories."""
    themes = {category: default_theme() for category in ThemeCategory}
    themes[ThemeCategory.PROFILE] = default_profile_theme()
    return themes


class ResumeStyle(BaseModel):
    """Style configuration for a resume."""

    theme: Dict[ThemeCategory, SectionTheme] = Field(default_factory=default_theme_map)
    lineHeight: float = Field(1.6, gt=0)
    sectionSpacing: float = Field(1.0, gt=0)

    def resolve(self, category: ThemeCategory) -> SectionTheme:
        """
        Resolve the theme for a category.

        Falls back to the global theme when the category is absent, and to
        the built-in default when global is absent too, so every category
        always resolves to a theme.
        """
        category = ThemeCategory(category)
        theme = self.theme.get(category) or self.theme.get(ThemeCategory.GLOBAL)
        if theme is None:
            theme = default_profile_theme() if category == ThemeCategory.PROFILE else default_theme()
        return theme

    def for_section(self, section: "Section") -> SectionTheme:
        """Resolve the theme that styles a section."""
        return self.resolve(SECTION_THEME_CATEGORY[section.type])


def default_styles() -> ResumeStyle:
    """Default style configuration."""
    return ResumeStyle()


class Link(BaseModel):
    """Labelled link attached to a section item."""

    label: str
    url: str


class SectionItem(BaseModel):
    """One entry within a section, e.g. one job; may nest sub-items."""

    id: str
    title: Optional[str] = None
    subtitle: Optional[str] = None
    date: Optional[str] = None
    description: Optional[str] = None
    techStack: Optional[List[str]] = None
    points: Optional[List[str]] = None
    links: Optional[List[Link]] = None
    location: Optional[str] = None
    images: Optional[List[str]] = None
    subItems: Optional[List["SectionItem"]] = None


class Section(BaseModel):
    """Named, typed, orderable group of items."""

    id: str
    type: SectionType
    title: str
    visible: Optional[bool] = None
    items: List[SectionItem] = Field(default_factory=list)

    @property
    def is_visible(self) -> bool:
        """Undefined visibility counts as visible."""
        return self.visible is not False


class Profile(BaseModel):
    """Profile header of a resume."""

    name: str = ""
    role: str = ""
    intro: str = ""
    image: Optional[str] = None
    contact: Dict[str, Optional[str]] = Field(default_factory=dict)


class Resume(BaseModel):
    """Complete resume document."""

    id: Optional[str] = None
    title: Optional[str] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None
    profile: Profile
    sections: List[Section]
    styles: ResumeStyle = Field(default_factory=default_styles)

    def find_section(self, section_id: str) -> Optional[Section]:
        """Return the section with the given id, if any."""
        return next((s for s in self.sections if s.id == section_id), None)


class ResumeMeta(BaseModel):
    """Metadata listing entry used by the resume picker."""

    id: str
    title: str
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None


SectionItem.model_rebuild()


def default_sections() -> List[Section]:
    """The four sections every new resume starts with."""
    return [
        Section(id="exp", type=SectionType.EXPERIENCE, title="Experience", visible=True),
        Section(id="proj", type=SectionType.PROJECT, title="Projects", visible=True),
        Section(id="edu", type=SectionType.EDUCATION, title="Education", visible=True),
        Section(id="act", type=SectionType.ACTIVITY, title="Activities", visible=True),
    ]


def default_profile() -> Profile:
    """Placeholder profile for a new resume."""
    return Profile(
        name="Your Name",
        role="Developer",
        intro="",
        contact={"email": "", "phone": "", "github": "", "blog": ""},
    )


def new_resume_skeleton(title: str) -> Resume:
    """
    Build the default skeleton for a new resume.

    Args:
        title: Resume title

    Returns:
        Resume: Unsaved resume without id or timestamps
    """
    return Resume(
        title=title,
        profile=default_profile(),
        sections=default_sections(),
        styles=default_styles(),
    )


def dump_resume(resume: Resume) -> dict:
    """JSON-compatible dict of a resume, omitting unset optional fields."""
    return resume.model_dump(mode="json", exclude_none=True)


def serialize_resume(resume: Optional[Resume]) -> str:
    """Canonical JSON text of a resume, used for change detection."""
    if resume is None:
        return ""
    return json.dumps(dump_resume(resume), sort_keys=True, ensure_ascii=False)


def walk_items(
    items: List[SectionItem],
    max_depth: int = MAX_ITEM_DEPTH,
) -> Iterator[Tuple[int, SectionItem]]:
    """
    Walk an item tree depth-first.

    Args:
        items: Top-level items
        max_depth: Deepest nesting level to descend into (top level is 0)

    Yields:
        Tuple[int, SectionItem]: Depth and item
    """
    seen = set()
    stack = [(0, item) for item in reversed(items)]
    while stack:
        depth, item = stack.pop()
        if id(item) in seen:
            continue
        seen.add(id(item))
        yield depth, item
        if item.subItems and depth < max_depth:
            stack.extend((depth + 1, child) for child in reversed(item.subItems))
