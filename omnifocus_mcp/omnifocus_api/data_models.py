"""
Data models representing OmniFocus objects (folders, projects, tasks, tags).

The remote store owns the real objects; these mirror its containment shape so
lookups can be reasoned about (and tested) without OmniFocus running.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class TaskNode:
    name: str
    completed: bool = False


@dataclass
class ProjectNode:
    name: str
    note: str = ""
    tasks: List[TaskNode] = field(default_factory=list)


@dataclass
class FolderNode:
    name: str
    folders: List["FolderNode"] = field(default_factory=list)
    projects: List[ProjectNode] = field(default_factory=list)


@dataclass
class TagNode:
    name: str
    tags: List["TagNode"] = field(default_factory=list)


@dataclass
class Document:
    """Top level of an OmniFocus database."""

    projects: List[ProjectNode] = field(default_factory=list)
    folders: List[FolderNode] = field(default_factory=list)
    tags: List[TagNode] = field(default_factory=list)
    inbox: List[TaskNode] = field(default_factory=list)
