import os
import shutil
import sys
import tempfile
import unittest
from unittest.mock import patch

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from git_graph_data import HEAD_TYPE_BRANCH, HEAD_TYPE_DETACHED, RefEntry
from git_manager import GitManager
from ref_resolver import ReferenceSet, enumerate_stashes, list_references, resolve_references
from repo_helpers import commit, init_repo, write_file


class TestResolveReferences(unittest.TestCase):
    def setUp(self):
        self.repo_path = tempfile.mkdtemp()
        self.repo = init_repo(self.repo_path)
        self.a = commit(self.repo, "A", 1, files={"a.txt": "a\n"})
        self.b = commit(self.repo, "B", 2, files={"a.txt": "b\n"})
        self.c = commit(self.repo, "C", 3, files={"a.txt": "c\n"})
        self.repo.create_tag("v1", ref=self.b)
        self.manager = GitManager(self.repo_path)
        self.manager.initialize()

    def tearDown(self):
        self.manager.close()
        self.repo.close()
        shutil.rmtree(self.repo_path)

    def test_labels_and_head(self):
        refs = resolve_references(self.manager)
        self.assertEqual(refs.labels_for(self.c.hexsha), ("HEAD", "main"))
        self.assertEqual(refs.labels_for(self.b.hexsha), ("v1",))
        self.assertEqual(refs.labels_for(self.a.hexsha), ())
        self.assertEqual(refs.head_id, self.c.hexsha)
        self.assertEqual(refs.head_type, HEAD_TYPE_BRANCH)
        self.assertEqual(refs.root_ids(), [self.c.hexsha, self.b.hexsha])

    def test_detached_head(self):
        self.repo.git.checkout("--detach", self.a.hexsha)
        refs = resolve_references(self.manager)
        self.assertEqual(refs.head_id, self.a.hexsha)
        self.assertEqual(refs.head_type, HEAD_TYPE_DETACHED)
        self.assertEqual(refs.labels_for(self.a.hexsha), ("HEAD",))
        self.assertEqual(refs.labels_for(self.c.hexsha), ("main",))
        # main stays a root even though HEAD moved behind it
        self.assertEqual(refs.root_ids(), [self.a.hexsha, self.c.hexsha, self.b.hexsha])

    def test_annotated_tag_is_peeled(self):
        self.repo.create_tag("v2", ref=self.a, message="release 2")
        refs = resolve_references(self.manager)
        self.assertEqual(refs.labels_for(self.a.hexsha), ("v2",))
        self.assertIn(self.a.hexsha, refs.tag_ids)

    def test_branch_names_keep_namespaces(self):
        self.repo.create_head("feature/login", self.b)
        refs = resolve_references(self.manager)
        self.assertEqual(refs.labels_for(self.b.hexsha), ("feature/login", "v1"))

    def test_remote_branches_are_labels_not_roots(self):
        self.repo.create_remote("origin", "https://example.invalid/repo.git")
        self.repo.git.update_ref("refs/remotes/origin/main", self.b.hexsha)
        refs = resolve_references(self.manager)
        self.assertEqual(refs.labels_for(self.b.hexsha), ("origin/main", "v1"))
        self.assertNotIn(self.b.hexsha, refs.branch_ids)

    def test_tag_on_tree_is_skipped(self):
        self.repo.git.tag("tree-tag", self.c.tree.hexsha)
        refs = resolve_references(self.manager)
        self.assertNotIn("tree-tag", [name for names in refs.labels.values() for name in names])
        self.assertEqual(refs.labels_for(self.b.hexsha), ("v1",))

    def test_unreadable_branch_is_skipped(self):
        original = GitManager.get_branches

        def branches_with_broken(manager):
            return [UnreadableRef("refs/heads/broken"), *original(manager)]

        with patch.object(GitManager, "get_branches", branches_with_broken):
            refs = resolve_references(self.manager)
        self.assertEqual(refs.labels_for(self.c.hexsha), ("HEAD", "main"))
        self.assertEqual(refs.branch_ids, (self.c.hexsha,))

    def test_empty_repository(self):
        shutil.rmtree(self.repo_path)
        os.makedirs(self.repo_path)
        init_repo(self.repo_path)
        with GitManager(self.repo_path) as manager:
            refs = resolve_references(manager)
            self.assertEqual(dict(refs.labels), {})
            self.assertIsNone(refs.head_id)
            self.assertIsNone(refs.head_type)
            self.assertEqual(refs.root_ids(), [])
            self.assertEqual(list_references(manager), [])

    def test_labels_are_read_only(self):
        refs = resolve_references(self.manager)
        with self.assertRaises(TypeError):
            refs.labels["x"] = ("y",)


class UnreadableRef:
    def __init__(self, path):
        self.path = path
        self.name = path.split("/", 2)[-1]

    @property
    def commit(self):
        raise ValueError(f"Reference at {self.path!r} does not exist")


class TestStashes(unittest.TestCase):
    def setUp(self):
        self.repo_path = tempfile.mkdtemp()
        self.repo = init_repo(self.repo_path)
        self.base = commit(self.repo, "base", 1, files={"a.txt": "base\n"})
        self.manager = GitManager(self.repo_path)
        self.manager.initialize()

    def tearDown(self):
        self.manager.close()
        self.repo.close()
        shutil.rmtree(self.repo_path)

    def test_no_stash(self):
        self.assertEqual(enumerate_stashes(self.manager), ())

    def test_stash_labels_newest_first(self):
        write_file(self.repo, "a.txt", "one\n")
        self.repo.git.stash("push", "-m", "one")
        write_file(self.repo, "a.txt", "two\n")
        self.repo.git.stash("push", "-m", "two")

        stashes = enumerate_stashes(self.manager)
        self.assertEqual([s.label for s in stashes], ["stash@{0}", "stash@{1}"])
        self.assertEqual(stashes[0].commit_id, self.repo.git.rev_parse("stash@{0}"))
        self.assertEqual(stashes[1].commit_id, self.repo.git.rev_parse("stash@{1}"))
        self.assertIn("two", stashes[0].message)

        refs = resolve_references(self.manager)
        self.assertEqual(refs.stashes, stashes)
        self.assertEqual(refs.root_ids(), [self.base.hexsha, stashes[0].commit_id, stashes[1].commit_id])

    def test_unreadable_stash_reflog(self):
        write_file(self.repo, "a.txt", "wip\n")
        self.repo.git.stash("push")
        with open(os.path.join(self.repo.git_dir, "logs", "refs", "stash"), "w") as f:
            f.write("not a reflog line\n")
        self.assertEqual(enumerate_stashes(self.manager), ())
        # without readable entries there are no stash roots either
        self.assertEqual(resolve_references(self.manager).root_ids(), [self.base.hexsha])

    def test_list_references(self):
        self.repo.create_tag("v1", ref=self.base)
        self.repo.create_head("dev", self.base)
        write_file(self.repo, "a.txt", "wip\n")
        self.repo.git.stash("push")
        stash_id = self.repo.git.rev_parse("stash@{0}")

        self.assertEqual(
            list_references(self.manager),
            [
                RefEntry("HEAD", self.base.hexsha),
                RefEntry("dev", self.base.hexsha),
                RefEntry("main", self.base.hexsha),
                RefEntry("refs/tags/v1", self.base.hexsha),
                RefEntry("stash@{0}", stash_id),
            ],
        )

    def test_reference_set_defaults(self):
        refs = ReferenceSet()
        self.assertEqual(refs.root_ids(), [])
        self.assertEqual(refs.labels_for("abc"), ())


if __name__ == "__main__":
    unittest.main()
