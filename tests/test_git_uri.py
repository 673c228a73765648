from __future__ import annotations

import unittest

from trydir.git_uri import GitUri, generate_clone_directory_name, is_git_uri, parse_git_uri

NOW = 1_756_166_400.0


class ParseGitUriTests(unittest.TestCase):
    def test_parse_https_with_git_suffix(self) -> None:
        self.assertEqual(
            parse_git_uri("https://github.com/tobi/try.git"),
            GitUri(host="github.com", user="tobi", repo="try"),
        )

    def test_parse_ssh_form(self) -> None:
        self.assertEqual(
            parse_git_uri("git@gitlab.com:group/project.git"),
            GitUri(host="gitlab.com", user="group", repo="project"),
        )

    def test_parse_ignores_trailing_path_segments(self) -> None:
        parsed = parse_git_uri("https://github.com/user/repo/tree/main")
        self.assertIsNotNone(parsed)
        self.assertEqual(parsed.repo, "repo")

    def test_parse_rejects_incomplete_forms(self) -> None:
        self.assertIsNone(parse_git_uri("https://github.com/user"))
        self.assertIsNone(parse_git_uri("git@github.com/user/repo"))
        self.assertIsNone(parse_git_uri("git@github.com:repo"))
        self.assertIsNone(parse_git_uri("not a uri"))


class IsGitUriTests(unittest.TestCase):
    def test_detects_common_forms(self) -> None:
        for candidate in (
            "https://example.org/a/b",
            "git@host:a/b",
            "github.com/user/repo",
            "somewhere/repo.git",
        ):
            self.assertTrue(is_git_uri(candidate), candidate)

    def test_plain_queries_are_not_uris(self) -> None:
        for candidate in ("my idea", "notes", "2025-08-26-foo"):
            self.assertFalse(is_git_uri(candidate), candidate)


class CloneDirectoryNameTests(unittest.TestCase):
    def test_generated_name_is_dated_user_repo(self) -> None:
        self.assertEqual(
            generate_clone_directory_name("https://github.com/tobi/try.git", now=NOW),
            "2025-08-26-tobi-try",
        )

    def test_custom_name_wins(self) -> None:
        self.assertEqual(
            generate_clone_directory_name("https://github.com/tobi/try.git", "mine", now=NOW),
            "mine",
        )

    def test_unparseable_uri_yields_none(self) -> None:
        self.assertIsNone(generate_clone_directory_name("github.com", now=NOW))


if __name__ == "__main__":
    unittest.main()
