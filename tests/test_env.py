"""Tests for canvas_slicer.core.env: .env loading, walk-up logic and settings."""

import os
from pathlib import Path

import pytest
from canvas_slicer.core.env import Settings, find_dotenv, load_env, parse_dotenv, settings_from_env
from canvas_slicer.core.types import PreconditionError


class TestParseDotenv:
    def test_simple_key_value(self, tmp_path: Path) -> None:
        f = tmp_path / '.env'
        f.write_text('CANVAS_SLICER_SCALE=2\n')
        assert parse_dotenv(f) == {'CANVAS_SLICER_SCALE': '2'}

    def test_quoted_values(self, tmp_path: Path) -> None:
        f = tmp_path / '.env'
        f.write_text('MAGICK="/opt/im 7/magick"\nCROPPER=\'pillow\'\n')
        assert parse_dotenv(f) == {'MAGICK': '/opt/im 7/magick', 'CROPPER': 'pillow'}

    def test_comments_and_blank_lines_ignored(self, tmp_path: Path) -> None:
        f = tmp_path / '.env'
        f.write_text('# comment\n\nFOO=bar\n\n')
        assert parse_dotenv(f) == {'FOO': 'bar'}

    def test_line_without_equals(self, tmp_path: Path) -> None:
        f = tmp_path / '.env'
        f.write_text('NOEQUALS\nFOO=bar\n')
        assert parse_dotenv(f) == {'FOO': 'bar'}


class TestFindDotenv:
    def test_finds_in_start_dir(self, tmp_path: Path) -> None:
        dotenv = tmp_path / '.env'
        dotenv.write_text('X=1\n')
        assert find_dotenv(tmp_path) == dotenv

    def test_finds_in_parent(self, tmp_path: Path) -> None:
        subdir = tmp_path / 'sub'
        subdir.mkdir()
        dotenv = tmp_path / '.env'
        dotenv.write_text('X=1\n')
        assert find_dotenv(subdir) == dotenv

    def test_stops_at_git_dir(self, tmp_path: Path) -> None:
        repo = tmp_path / 'repo'
        (repo / '.git').mkdir(parents=True)
        (repo / 'src').mkdir()
        (tmp_path / '.env').write_text('X=1\n')
        assert find_dotenv(repo / 'src') is None

    def test_stops_at_git_file(self, tmp_path: Path) -> None:
        repo = tmp_path / 'repo'
        (repo / 'src').mkdir(parents=True)
        (repo / '.git').write_text('gitdir: ../somewhere\n')
        (tmp_path / '.env').write_text('X=1\n')
        assert find_dotenv(repo / 'src') is None

    def test_env_at_git_root_found(self, tmp_path: Path) -> None:
        (tmp_path / '.git').mkdir()
        dotenv = tmp_path / '.env'
        dotenv.write_text('X=1\n')
        assert find_dotenv(tmp_path) == dotenv


class TestLoadEnv:
    def test_sets_missing_vars(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv('TEST_SLICER_KEY', raising=False)
        (tmp_path / '.git').mkdir()
        (tmp_path / '.env').write_text('TEST_SLICER_KEY=value\n')
        monkeypatch.chdir(tmp_path)
        load_env()
        assert os.environ.get('TEST_SLICER_KEY') == 'value'
        os.environ.pop('TEST_SLICER_KEY', None)

    def test_does_not_overwrite_existing(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv('TEST_SLICER_KEY2', 'original')
        (tmp_path / '.git').mkdir()
        (tmp_path / '.env').write_text('TEST_SLICER_KEY2=fromfile\n')
        monkeypatch.chdir(tmp_path)
        load_env()
        assert os.environ.get('TEST_SLICER_KEY2') == 'original'

    def test_explicit_env_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv('TEST_SLICER_KEY3', raising=False)
        dotenv = tmp_path / 'custom.env'
        dotenv.write_text('TEST_SLICER_KEY3=custom\n')
        assert load_env(env_file=str(dotenv)) == dotenv
        assert os.environ.get('TEST_SLICER_KEY3') == 'custom'
        os.environ.pop('TEST_SLICER_KEY3', None)

    def test_missing_explicit_file(self, tmp_path: Path) -> None:
        assert load_env(env_file=str(tmp_path / 'missing.env')) is None

    def test_returns_none_when_no_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / '.git').mkdir()
        monkeypatch.chdir(tmp_path)
        assert load_env() is None


class TestSettingsFromEnv:
    def test_defaults(self) -> None:
        assert settings_from_env({}) == Settings(scale=1, cropper='pillow', magick=None, timestamps=False)

    def test_all_set(self) -> None:
        env = {
            'CANVAS_SLICER_SCALE': '3',
            'CANVAS_SLICER_CROPPER': 'magick',
            'CANVAS_SLICER_MAGICK': '/usr/local/bin/magick',
            'CANVAS_SLICER_TIMESTAMPS': 'yes',
        }
        assert settings_from_env(env) == Settings(
            scale=3, cropper='magick', magick='/usr/local/bin/magick', timestamps=True
        )

    def test_blank_cropper_keeps_default(self) -> None:
        assert settings_from_env({'CANVAS_SLICER_CROPPER': '  '}).cropper == 'pillow'

    @pytest.mark.parametrize('raw', ['0', '-2', 'two', '1.5'])
    def test_bad_scale(self, raw: str) -> None:
        with pytest.raises(PreconditionError, match='CANVAS_SLICER_SCALE'):
            settings_from_env({'CANVAS_SLICER_SCALE': raw})

    def test_bad_flag(self) -> None:
        with pytest.raises(PreconditionError, match='CANVAS_SLICER_TIMESTAMPS'):
            settings_from_env({'CANVAS_SLICER_TIMESTAMPS': 'maybe'})

    def test_reads_os_environ(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv('CANVAS_SLICER_SCALE', '4')
        assert settings_from_env().scale == 4
