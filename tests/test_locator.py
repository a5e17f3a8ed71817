import pytest

from omnifocus_mcp.omnifocus_api.data_models import (
    Document,
    FolderNode,
    ProjectNode,
    TagNode,
    TaskNode,
)
from omnifocus_mcp.omnifocus_api.locator import (
    EntityKind,
    iter_candidate_scopes,
    locate,
    resolve,
)


def _render(statements):
    lines = []
    for statement in statements:
        lines.extend(statement.render(0))
    return "\n".join(lines)


@pytest.fixture
def shadowed_document():
    """The project name "Plan" exists at every level of one folder branch."""
    nested = FolderNode("Nested", projects=[ProjectNode("Plan", note="nested")])
    sub = FolderNode("Sub", folders=[nested], projects=[ProjectNode("Plan", note="sub")])
    work = FolderNode("Work", folders=[sub], projects=[ProjectNode("Plan", note="folder")])
    return Document(projects=[ProjectNode("Plan", note="top")], folders=[work])


def _tag_chain(depth):
    node = None
    for level in range(depth, 0, -1):
        node = TagNode(f"L{level}", tags=[node] if node else [])
    return node


class TestResolve:
    def test_top_level_wins(self, shadowed_document):
        match = resolve(EntityKind.PROJECT, "Plan", shadowed_document)
        assert match.node.note == "top"
        assert match.location == "Top Level"

    def test_folder_beats_subfolder(self, shadowed_document):
        shadowed_document.projects.clear()
        match = resolve(EntityKind.PROJECT, "Plan", shadowed_document)
        assert match.node.note == "folder"
        assert match.path == ("Work",)

    def test_subfolder_beats_nested(self, shadowed_document):
        shadowed_document.projects.clear()
        shadowed_document.folders[0].projects.clear()
        match = resolve(EntityKind.PROJECT, "Plan", shadowed_document)
        assert match.node.note == "sub"
        assert match.location == "Work > Sub"

    def test_nested_folder_is_found(self, shadowed_document):
        shadowed_document.projects.clear()
        shadowed_document.folders[0].projects.clear()
        shadowed_document.folders[0].folders[0].projects.clear()
        match = resolve(EntityKind.PROJECT, "Plan", shadowed_document)
        assert match.node.note == "nested"
        assert match.location == "Work > Sub > Nested"

    def test_first_declared_branch_is_searched_depth_first(self):
        deep = FolderNode("A", folders=[FolderNode("A1", projects=[ProjectNode("X", note="deep")])])
        shallow = FolderNode("B", projects=[ProjectNode("X", note="shallow")])
        match = resolve(EntityKind.PROJECT, "X", Document(folders=[deep, shallow]))
        assert match.node.note == "deep"

    def test_project_below_depth_three_is_not_found(self):
        level4 = FolderNode("D", projects=[ProjectNode("Deep")])
        doc = Document(folders=[FolderNode("A", folders=[FolderNode("B", folders=[FolderNode("C", folders=[level4])])])])
        assert resolve(EntityKind.PROJECT, "Deep", doc) is None

    def test_tag_at_depth_five_is_found(self):
        doc = Document(tags=[_tag_chain(6)])
        match = resolve(EntityKind.TAG, "L5", doc)
        assert match is not None
        assert match.path == ("L1", "L2", "L3", "L4")

    def test_tag_at_depth_six_is_not_found(self):
        doc = Document(tags=[_tag_chain(6)])
        assert resolve(EntityKind.TAG, "L6", doc) is None

    def test_folder_depth(self):
        doc = Document(folders=[FolderNode("A", folders=[FolderNode("B", folders=[FolderNode("C", folders=[FolderNode("D")])])])])
        assert resolve(EntityKind.FOLDER, "C", doc).location == "A > B"
        assert resolve(EntityKind.FOLDER, "D", doc) is None

    def test_names_compare_exactly(self, shadowed_document):
        assert resolve(EntityKind.PROJECT, "plan", shadowed_document) is None

    def test_tasks_have_no_candidate_scopes(self):
        with pytest.raises(ValueError):
            list(iter_candidate_scopes(EntityKind.TASK, Document()))


@pytest.fixture
def task_document():
    """A task named "Call" is done in the inbox and in Home, and open in Work > Clients."""
    inbox = [TaskNode("Call", completed=True), TaskNode("Email")]
    home = ProjectNode("Home", tasks=[TaskNode("Call", completed=True), TaskNode("Fix sink")])
    clients = ProjectNode("Clients", tasks=[TaskNode("Call")])
    work = FolderNode("Work", folders=[FolderNode("Deep", folders=[FolderNode("Deeper", folders=[FolderNode("Deepest", projects=[ProjectNode("Archive", tasks=[TaskNode("Old")])])])])], projects=[clients])
    return Document(projects=[home], folders=[work], inbox=inbox)


class TestResolveTask:
    def test_inbox_comes_first(self, task_document):
        match = resolve(EntityKind.TASK, "Call", task_document)
        assert match.node is task_document.inbox[0]
        assert match.location == "Top Level"

    def test_incomplete_only_skips_completed_tasks(self, task_document):
        match = resolve(EntityKind.TASK, "Call", task_document, incomplete_only=True)
        assert match.node.completed is False
        assert match.path == ("Work", "Clients")

    def test_project_scope(self, task_document):
        match = resolve(EntityKind.TASK, "Call", task_document, scope="Home")
        assert match.path == ("Home",)
        assert resolve(EntityKind.TASK, "Call", task_document, scope="Home", incomplete_only=True) is None

    def test_project_scope_only_searches_that_project(self, task_document):
        assert resolve(EntityKind.TASK, "Email", task_document, scope="Clients") is None
        assert resolve(EntityKind.TASK, "Call", task_document, scope="Missing") is None

    def test_every_task_is_searched_without_scope(self, task_document):
        match = resolve(EntityKind.TASK, "Old", task_document)
        assert match.location == "Work > Deep > Deeper > Deepest > Archive"


def test_candidate_scope_order(shadowed_document):
    paths = [scope.path for scope in iter_candidate_scopes(EntityKind.PROJECT, shadowed_document)]
    assert paths == [(), ("Work",), ("Work", "Sub"), ("Work", "Sub", "Nested")]


class TestLocateScript:
    def test_project_probes_follow_search_order(self):
        script = _render(locate(EntityKind.PROJECT, "Plan", "targetProject"))
        positions = [
            script.index('set targetProject to first project whose name is "Plan"'),
            script.index('first project of fld whose name is "Plan"'),
            script.index('first project of subfld whose name is "Plan"'),
            script.index('first project of nestedSubfld whose name is "Plan"'),
        ]
        assert positions == sorted(positions)
        assert script.startswith("set targetProject to missing value")

    def test_walk_stops_at_first_match(self):
        script = _render(locate(EntityKind.PROJECT, "Plan", "targetProject"))
        assert "if targetProject is not missing value then exit repeat" in script
        assert "exit repeat" in script

    def test_location_tracking(self):
        script = _render(locate(EntityKind.PROJECT, "Plan", "targetProject", track_location=True))
        assert 'set targetProjectLocation to "Top Level"' in script
        assert 'set targetProjectLocation to name of fld & " > " & name of subfld' in script

    def test_tag_walk_is_five_levels(self):
        script = _render(locate(EntityKind.TAG, "Errands", "targetTag"))
        assert 'first tag whose name is "Errands"' in script
        assert "repeat with tag5 in tags of tag4" in script
        assert 'if name of tag5 is "Errands" then' in script
        assert "tag6" not in script

    def test_folder_walk_is_two_levels(self):
        script = _render(locate(EntityKind.FOLDER, "Clients", "targetFolder"))
        assert 'first folder of subfld whose name is "Clients"' in script
        assert "nestedSubfld" not in script

    def test_task_in_project_scope(self):
        script = _render(locate(EntityKind.TASK, "Call", "targetTask", scope="targetProject"))
        assert 'first task of targetProject whose name is "Call"' in script
        assert "inbox" not in script

    def test_task_inbox_before_flattened(self):
        script = _render(locate(EntityKind.TASK, "Call", "targetTask", incomplete_only=True))
        inbox = script.index('first inbox task whose name is "Call" and completed is false')
        flattened = script.index('first flattened task whose name is "Call" and completed is false')
        assert inbox < flattened

    def test_names_are_sanitized(self):
        script = _render(locate(EntityKind.PROJECT, 'Q3 "Big" \\ Plan', "targetProject"))
        assert 'whose name is "Q3 \\"Big\\" \\\\ Plan"' in script
