"""Unit tests for git diff parsing."""

from chiefr.vcs.git import parse_diff
from chiefr.vcs.models import ChunkType

MODIFIED = """\
diff --git a/src/main.go b/src/main.go
index 1111111..2222222 100644
--- a/src/main.go
+++ b/src/main.go
@@ -1,4 +1,4 @@
 package main
-import "fmt"
+import "log"
 
 func main() {}
"""

ADDED_AND_DELETED = """\
diff --git a/docs/new.md b/docs/new.md
new file mode 100644
index 0000000..3333333
--- /dev/null
+++ b/docs/new.md
@@ -0,0 +1,2 @@
+# New
+--- not a header
diff --git a/old.txt b/old.txt
deleted file mode 100644
index 4444444..0000000
--- a/old.txt
+++ /dev/null
@@ -1 +0,0 @@
-obsolete
\\ No newline at end of file
"""

BINARY_AND_EMPTY = """\
diff --git a/logo.png b/logo.png
new file mode 100644
index 0000000..5555555
Binary files /dev/null and b/logo.png differ
diff --git a/my file.txt b/my file.txt
new file mode 100644
index 0000000..e69de29
"""


class TestParseDiff:
    """Tests for turning diff text into file patches."""

    def test_modified_file_chunks(self):
        (patch,) = parse_diff(MODIFIED)

        assert patch.from_path == "src/main.go"
        assert patch.to_path == "src/main.go"
        assert [c.type for c in patch.chunks] == [
            ChunkType.EQUAL,
            ChunkType.DELETE,
            ChunkType.ADD,
            ChunkType.EQUAL,
        ]
        assert patch.chunks[3].content == "\nfunc main() {}\n"
        assert patch.content == (
            'package main\nimport "fmt"\nimport "log"\n\nfunc main() {}\n'
        )

    def test_added_and_deleted(self):
        added, deleted = parse_diff(ADDED_AND_DELETED)

        assert added.from_path is None
        assert added.to_path == "docs/new.md"
        assert added.content == "# New\n--- not a header\n"

        assert deleted.is_deletion
        assert deleted.effective_path == "old.txt"
        assert deleted.chunks[0].type is ChunkType.DELETE
        assert deleted.content == "obsolete\n"

    def test_files_without_hunks(self):
        binary, empty = parse_diff(BINARY_AND_EMPTY)

        assert binary.effective_path == "logo.png"
        assert binary.chunks == []
        assert empty.effective_path == "my file.txt"
        assert empty.from_path is None

    def test_empty_diff(self):
        assert parse_diff("") == []

    def test_quoted_paths_are_decoded(self):
        diff = (
            r'diff --git "a/tab\tname.md" "b/tab\tname.md"' "\n"
            "index 1111111..2222222 100644\n"
            r'--- "a/tab\tname.md"' "\n"
            r'+++ "b/tab\tname.md"' "\n"
            "@@ -1 +1 @@\n"
            "-old\n"
            "+new\n"
        )

        (patch,) = parse_diff(diff)

        assert patch.from_path == "tab\tname.md"
        assert patch.to_path == "tab\tname.md"
        assert patch.content == "old\nnew\n"

    def test_quoted_octal_and_escaped_quote(self):
        diff = (
            r'diff --git "a/caf\303\251.md" "b/say \"hi\".md"' "\n"
            "new file mode 100644\n"
            "--- /dev/null\n"
            r'+++ "b/say \"hi\".md"' "\n"
            "@@ -0,0 +1 @@\n"
            "+hello\n"
        )

        (patch,) = parse_diff(diff)

        assert patch.from_path is None
        assert patch.to_path == 'say "hi".md'

    def test_quoted_header_without_hunks(self):
        diff = (
            r'diff --git "a/caf\303\251.png" "b/caf\303\251.png"' "\n"
            "index 1111111..2222222 100644\n"
            r'Binary files "a/caf\303\251.png" and "b/caf\303\251.png" differ' "\n"
        )

        (patch,) = parse_diff(diff)

        assert patch.effective_path == "café.png"
        assert patch.chunks == []
