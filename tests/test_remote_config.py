"""Tests for idempotent remote configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from errors import ConfigWriteFailed
from remote_config import configured_url, ensure_remote, has_remote

BARE_CONFIG = """[core]
\trepositoryformatversion = 0
\tbare = true
[remote "origin"]
\turl = git@github.com:acme/widgets.git
\tfetch = +refs/*:refs/*
\tmirror = true
"""


def _make_mirror(tmp_path: Path, content: str = BARE_CONFIG) -> Path:
    dest = tmp_path / 'widgets'
    dest.mkdir()
    (dest / 'config').write_text(content, encoding='utf-8')
    return dest


def test_ensure_remote_appends_stanza_with_refspecs(tmp_path: Path) -> None:
    """A missing remote is appended with both branch and tag refspecs."""
    dest = _make_mirror(tmp_path)

    assert ensure_remote(str(dest), 'archive', 'ssh://host/v1/repos/widgets') is True

    text = (dest / 'config').read_text(encoding='utf-8')
    assert text.startswith(BARE_CONFIG)
    assert text.count('[remote "archive"]') == 1
    assert '\turl = ssh://host/v1/repos/widgets\n' in text
    assert '\tfetch = +refs/heads/*:refs/heads/*\n' in text
    assert '\tfetch = +refs/tags/*:refs/tags/*\n' in text


def test_ensure_remote_twice_keeps_single_stanza(tmp_path: Path) -> None:
    """Running again must not duplicate the remote."""
    dest = _make_mirror(tmp_path)

    ensure_remote(str(dest), 'archive', 'url')
    first = (dest / 'config').read_text(encoding='utf-8')
    assert ensure_remote(str(dest), 'archive', 'url') is False

    assert (dest / 'config').read_text(encoding='utf-8') == first
    assert first.count('[remote "archive"]') == 1


def test_ensure_remote_does_not_repoint_existing_remote(tmp_path: Path) -> None:
    """An existing remote with a different URL counts as configured."""
    dest = _make_mirror(tmp_path)
    ensure_remote(str(dest), 'archive', 'old-url')

    assert ensure_remote(str(dest), 'archive', 'new-url') is False
    text = (dest / 'config').read_text(encoding='utf-8')
    assert 'old-url' in text
    assert 'new-url' not in text


def test_ensure_remote_adds_newline_when_missing(tmp_path: Path) -> None:
    dest = _make_mirror(tmp_path, '[core]\n\tbare = true')

    ensure_remote(str(dest), 'github', 'git@github.com:acme/widgets.git')

    lines = (dest / 'config').read_text(encoding='utf-8').splitlines()
    assert lines[:3] == ['[core]', '\tbare = true', '[remote "github"]']


def test_ensure_remote_distinguishes_remote_names(tmp_path: Path) -> None:
    dest = _make_mirror(tmp_path)

    ensure_remote(str(dest), 'archive', 'a')
    assert ensure_remote(str(dest), 'github', 'b') is True

    text = (dest / 'config').read_text(encoding='utf-8')
    assert text.count('[remote "archive"]') == 1
    assert text.count('[remote "github"]') == 1


def test_ensure_remote_missing_config_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigWriteFailed):
        ensure_remote(str(tmp_path / 'absent'), 'archive', 'url')


def test_has_remote_matches_literal_header_only() -> None:
    assert has_remote('[remote "archive"]\n', 'archive')
    assert not has_remote('[remote "archive-old"]\n', 'archive')
    assert not has_remote('# remote archive\n', 'archive')


def test_undecodable_config_raises_config_write_failed(tmp_path: Path) -> None:
    dest = tmp_path / 'widgets'
    dest.mkdir()
    (dest / 'config').write_bytes(b'[core]\n\tbare = true\n\xff\xfe\n')

    with pytest.raises(ConfigWriteFailed):
        ensure_remote(str(dest), 'archive', 'url')


def test_configured_url_reads_remote_section(tmp_path: Path) -> None:
    dest = _make_mirror(tmp_path)
    ensure_remote(str(dest), 'archive', 'ssh://host/v1/repos/widgets')

    assert configured_url(str(dest), 'origin') == 'git@github.com:acme/widgets.git'
    assert configured_url(str(dest), 'archive') == 'ssh://host/v1/repos/widgets'
    assert configured_url(str(dest), 'github') is None


def test_configured_url_without_mirror_is_none(tmp_path: Path) -> None:
    assert configured_url(str(tmp_path / 'missing'), 'origin') is None
