"""Tests for the local mirror store."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from errors import UpdateFailed
from git_runner import GitRunner
from mirror_store import LocalMirrorStore, MirrorState
from remote_config import ensure_remote

requires_git = pytest.mark.skipif(shutil.which('git') is None, reason='git not installed')


def _git(*args: str) -> str:
    result = subprocess.run(
        ['git', '-c', 'user.name=Test', '-c', 'user.email=test@example.com',
         '-c', 'commit.gpgsign=false', '-c', 'init.defaultBranch=main', *args],
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout


def _make_source_repo(path: Path) -> Path:
    _git('init', '-q', str(path))
    (path / 'README').write_text('hello\n', encoding='utf-8')
    _git('-C', str(path), 'add', 'README')
    _git('-C', str(path), 'commit', '-q', '-m', 'initial')
    _git('-C', str(path), 'tag', 'v1.0')
    return path


def test_clone_when_destination_absent(tmp_path: Path) -> None:
    runner = MagicMock(spec=GitRunner)
    store = LocalMirrorStore(str(tmp_path), runner)
    dest = store.path_for('widgets')

    state = store.clone_or_update('git@github.com:acme/widgets.git', dest)

    assert state is MirrorState.CLONED
    runner.clone_mirror.assert_called_once_with('git@github.com:acme/widgets.git', dest, None)
    runner.remote_update.assert_not_called()


def test_update_when_destination_exists(tmp_path: Path) -> None:
    """An existing mirror is updated in place, never re-cloned."""
    runner = MagicMock(spec=GitRunner)
    store = LocalMirrorStore(str(tmp_path), runner)
    dest = store.path_for('widgets')
    Path(dest).mkdir()

    state = store.clone_or_update('git@github.com:acme/widgets.git', dest)

    assert state is MirrorState.UP_TO_DATE
    runner.remote_update.assert_called_once_with(dest, 'origin', None)
    runner.clone_mirror.assert_not_called()


def test_failed_update_keeps_local_data(tmp_path: Path) -> None:
    runner = MagicMock(spec=GitRunner)
    runner.remote_update.side_effect = UpdateFailed(['git'], 'fatal: could not read')
    store = LocalMirrorStore(str(tmp_path), runner)
    dest = Path(store.path_for('widgets'))
    dest.mkdir()
    (dest / 'HEAD').write_text('ref: refs/heads/main\n', encoding='utf-8')

    with pytest.raises(UpdateFailed):
        store.clone_or_update('url', str(dest))

    assert (dest / 'HEAD').read_text(encoding='utf-8') == 'ref: refs/heads/main\n'


def test_ensure_workdir_creates_nested_root(tmp_path: Path) -> None:
    store = LocalMirrorStore(str(tmp_path / 'a' / 'work'))

    root = store.ensure_workdir()

    assert Path(root).is_dir()
    assert store.path_for('x') == str(Path(root) / 'x')


@requires_git
def test_clone_or_update_twice_with_real_git(tmp_path: Path) -> None:
    """Second call updates, succeeds and keeps the first clone's refs."""
    source = _make_source_repo(tmp_path / 'source')
    store = LocalMirrorStore(str(tmp_path / 'work'), GitRunner())
    store.ensure_workdir()
    dest = store.path_for('widgets')

    assert store.clone_or_update(str(source), dest) is MirrorState.CLONED
    assert store.clone_or_update(str(source), dest) is MirrorState.UP_TO_DATE

    assert 'v1.0' in _git('-C', dest, 'tag').split()
    assert _git('-C', dest, 'rev-parse', '--is-bare-repository').strip() == 'true'


@requires_git
def test_mirror_push_transfers_branches_and_tags(tmp_path: Path) -> None:
    source = _make_source_repo(tmp_path / 'source')
    target = tmp_path / 'archive.git'
    _git('init', '-q', '--bare', str(target))
    runner = GitRunner()
    store = LocalMirrorStore(str(tmp_path / 'work'), runner)
    dest = store.path_for('widgets')

    store.clone_or_update(str(source), dest)
    ensure_remote(dest, 'archive', str(target))
    runner.push_mirror(dest, 'archive')

    assert 'v1.0' in _git('-C', str(target), 'tag').split()
    branches = ['branch', '--format=%(refname:short)']
    assert _git('-C', str(target), *branches).split() == _git('-C', str(source), *branches).split()
