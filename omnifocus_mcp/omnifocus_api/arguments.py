"""
Argument models for every tool, validated before any script is generated.

Field names are snake_case in Python and camelCase on the wire
(``taskName``, ``includeCompleted``); either spelling is accepted.
"""

import re
from datetime import date, datetime
from typing import Annotated, Literal, Optional

from dateutil.parser import isoparse
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .statuses import ProjectStatus

# isoparse alone also takes "2025", "2025-06" and "20250601"
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}([T ]\d{2}:\d{2}(:\d{2})?)?$")


def _parse_date(value):
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        if not DATE_PATTERN.match(text):
            raise ValueError(f"invalid date {value!r}, expected YYYY-MM-DD")
        try:
            return isoparse(text)
        except ValueError:
            raise ValueError(f"invalid date {value!r}, expected YYYY-MM-DD") from None
    raise ValueError("expected a YYYY-MM-DD date string")


DateArg = Annotated[datetime, BeforeValidator(_parse_date)]
Name = Annotated[str, Field(min_length=1)]
ProjectType = Literal["parallel", "sequential", "single"]


class ToolArguments(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class NoArguments(ToolArguments):
    pass


class TaskRef(ToolArguments):
    task_name: Name
    project: Optional[str] = None


class ProjectRef(ToolArguments):
    project_name: Name


# --- Tasks -------------------------------------------------------------------

class CreateTaskArgs(ToolArguments):
    name: Name
    note: Optional[str] = None
    project: Optional[str] = None
    project_id: Optional[str] = Field(default=None, alias="project_id")
    context: Optional[str] = None
    due_date: Optional[DateArg] = None
    defer_date: Optional[DateArg] = None
    estimated_minutes: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _one_project_reference(self):
        if self.project and self.project_id:
            raise ValueError("use either project or project_id, not both")
        return self


class EditTaskArgs(TaskRef):
    new_name: Optional[Name] = None
    new_note: Optional[str] = None
    new_project: Optional[str] = None
    new_context: Optional[str] = None
    new_due_date: Optional[DateArg] = None
    new_defer_date: Optional[DateArg] = None
    flagged: Optional[bool] = None
    estimated_minutes: Optional[int] = Field(default=None, ge=0)


class MoveTaskArgs(ToolArguments):
    task_name: Name
    from_project: Optional[str] = None
    to_project: Name


class SetTaskFlagArgs(TaskRef):
    flagged: bool


class SetTaskDatesArgs(TaskRef):
    due_date: Optional[DateArg] = None
    defer_date: Optional[DateArg] = None
    estimated_minutes: Optional[int] = Field(default=None, ge=0)


class ListTasksArgs(ToolArguments):
    project: Optional[str] = None
    context: Optional[str] = None
    include_completed: bool = False
    inbox_only: bool = False


class SearchTasksArgs(ToolArguments):
    query: Name


# --- Projects ----------------------------------------------------------------

class CreateProjectArgs(ToolArguments):
    name: Name
    note: Optional[str] = None
    folder: Optional[str] = None
    project_type: Optional[ProjectType] = Field(default=None, alias="type")


class EditProjectArgs(ProjectRef):
    new_name: Optional[Name] = None
    new_note: Optional[str] = None
    new_folder: Optional[str] = None
    new_type: Optional[ProjectType] = None
    new_context: Optional[str] = None


class ArchiveProjectArgs(ProjectRef):
    status: Literal["completed", "dropped"] = "completed"


class SetProjectStatusArgs(ProjectRef):
    status: ProjectStatus


class SetProjectFlagArgs(ProjectRef):
    flagged: bool


class SetProjectDatesArgs(ProjectRef):
    due_date: Optional[DateArg] = None
    defer_date: Optional[DateArg] = None


class MoveProjectArgs(ProjectRef):
    to_folder: Name


class ListProjectsArgs(ToolArguments):
    include_completed: bool = False
    incomplete_only: bool = False
    empty_projects_only: bool = False


class GetProjectLinkArgs(ProjectRef):
    format: Literal["url", "markdown", "html"] = "markdown"


# --- Tags --------------------------------------------------------------------

class CreateContextArgs(ToolArguments):
    name: Name
    parent: Optional[str] = None


class ListContextsArgs(ToolArguments):
    include_inactive: bool = False


class ListTagsArgs(ToolArguments):
    include_inactive: bool = False
    include_usage_stats: bool = False


class GetTagDetailsArgs(ToolArguments):
    tag_name: Name


# --- Folders -----------------------------------------------------------------

class ListFoldersArgs(ToolArguments):
    include_project_counts: bool = False
    include_empty_folders: bool = True


class GetFolderDetailsArgs(ToolArguments):
    folder_name: Name


class ListFolderHierarchyArgs(ToolArguments):
    include_project_counts: bool = False
    include_task_counts: bool = False
    include_empty_folders: bool = True


# --- Perspectives ------------------------------------------------------------

class SwitchPerspectiveArgs(ToolArguments):
    perspective_name: Name


class GetPerspectiveContentsArgs(ToolArguments):
    perspective_name: Optional[str] = None
