"""Tests for project creation."""

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from sprout.config import ProjectConfig
from sprout.errors import PackageManagerError, ProjectCreationError
from sprout.project import (
    check_project_path,
    create_project,
    set_package_name,
    validate_project_name,
)
from sprout.templates import ResolvedTemplate
from sprout.templates.base import GitHubTemplate

CODELOAD = "https://codeload.github.com"
TEMPLATE = ResolvedTemplate("acme", "tpl", "main")


class TestValidateProjectName:
    """Tests for validate_project_name."""

    @pytest.mark.parametrize("name", ["my-app", "app2", "a.b_c~d", " spaced "])
    def test_valid(self, name: str) -> None:
        assert validate_project_name(name) == name.strip()

    @pytest.mark.parametrize(
        "name", ["", "   ", ".", "..", ".hidden", "_private", "MyApp", "a b", "a/b"]
    )
    def test_invalid(self, name: str) -> None:
        with pytest.raises(ValueError):
            validate_project_name(name)

    def test_too_long(self) -> None:
        with pytest.raises(ValueError, match="214"):
            validate_project_name("a" * 215)


class TestCheckProjectPath:
    """Tests for check_project_path."""

    def test_missing_path_is_fine(self, tmp_path: Path) -> None:
        check_project_path(tmp_path / "new")

    def test_empty_directory_is_fine(self, tmp_path: Path) -> None:
        check_project_path(tmp_path)

    def test_non_empty_directory(self, tmp_path: Path) -> None:
        (tmp_path / "file.txt").write_text("x")
        with pytest.raises(ProjectCreationError, match="not empty"):
            check_project_path(tmp_path)

    def test_file(self, tmp_path: Path) -> None:
        path = tmp_path / "file.txt"
        path.write_text("x")
        with pytest.raises(ProjectCreationError, match="not a directory"):
            check_project_path(path)


class TestSetPackageName:
    """Tests for set_package_name."""

    def test_rewrites_name(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text(
            json.dumps({"name": "template", "scripts": {"dev": "bun run src/index.ts"}})
        )

        set_package_name(tmp_path, "my-app")

        text = (tmp_path / "package.json").read_text()
        assert json.loads(text) == {
            "name": "my-app",
            "scripts": {"dev": "bun run src/index.ts"},
        }
        assert text.endswith("}\n")

    def test_invalid_json(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("{not json")
        with pytest.raises(ProjectCreationError, match="Failed to read"):
            set_package_name(tmp_path, "my-app")

    def test_not_an_object(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("[]")
        with pytest.raises(ProjectCreationError):
            set_package_name(tmp_path, "my-app")


@pytest.fixture
def template_archive(github, tarball, package_json) -> None:
    github.archive(
        f"{CODELOAD}/acme/tpl/tar.gz/main",
        tarball({"package.json": package_json, "index.ts": b"export {}"}),
    )


class TestCreateProject:
    """Tests for create_project."""

    @pytest.fixture(autouse=True)
    def package_manager_on_path(self):
        with patch(
            "sprout.package_manager.shutil.which", return_value="/usr/bin/bun"
        ):
            yield

    def _config(self, tmp_path: Path, **kwargs) -> ProjectConfig:
        return ProjectConfig(
            project_name="my-app",
            project_path=tmp_path / "my-app",
            template=kwargs.pop("template", TEMPLATE),
            package_manager="bun",
            **kwargs,
        )

    @patch("sprout.project.initialize_git_repository", return_value=True)
    @patch("sprout.package_manager.subprocess.run")
    def test_full_flow(
        self,
        mock_run: MagicMock,
        mock_git: MagicMock,
        client,
        template_archive,
        tmp_path,
    ) -> None:
        mock_run.return_value = MagicMock(returncode=0)
        config = self._config(tmp_path)

        create_project(config, client)

        manifest = json.loads((config.project_path / "package.json").read_text())
        assert manifest["name"] == "my-app"
        assert (config.project_path / "index.ts").exists()
        mock_run.assert_called_once_with(["bun", "install"], cwd=config.project_path)
        mock_git.assert_called_once_with(config.project_path)

    @patch("sprout.project.initialize_git_repository")
    @patch("sprout.package_manager.subprocess.run")
    def test_skip_install_and_git(
        self,
        mock_run: MagicMock,
        mock_git: MagicMock,
        client,
        template_archive,
        tmp_path,
    ) -> None:
        config = self._config(tmp_path, skip_install=True, skip_git=True)

        with patch("sprout.project.console") as mock_console:
            create_project(config, client)

        mock_run.assert_not_called()
        mock_git.assert_not_called()
        printed = [str(c.args[0]) for c in mock_console.print.call_args_list if c.args]
        assert "  bun install" in printed
        assert "  bun run dev" in printed

    @patch("sprout.project.initialize_git_repository", return_value=False)
    def test_git_failure_is_not_fatal(
        self, mock_git: MagicMock, client, template_archive, tmp_path
    ) -> None:
        config = self._config(tmp_path, skip_install=True)

        create_project(config, client)

        mock_git.assert_called_once()
        assert (config.project_path / "package.json").exists()

    @patch("sprout.package_manager.subprocess.run")
    def test_install_failure_propagates(
        self, mock_run: MagicMock, client, template_archive, tmp_path
    ) -> None:
        mock_run.return_value = MagicMock(returncode=1)
        config = self._config(tmp_path, skip_git=True)

        with pytest.raises(PackageManagerError):
            create_project(config, client)

    @patch("sprout.project.initialize_git_repository", return_value=True)
    def test_unresolved_source_is_validated(
        self, _mock_git: MagicMock, github, client, template_archive, tmp_path
    ) -> None:
        github.json(
            "GET", "https://api.github.com/repos/acme/tpl", {"default_branch": "main"}
        )
        config = self._config(
            tmp_path, template=GitHubTemplate("acme", "tpl"), skip_install=True
        )

        create_project(config, client)

        assert github.called("HEAD")
        assert (config.project_path / "package.json").exists()
