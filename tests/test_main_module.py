"""Tests for __main__.py module entry point."""

import os
import subprocess
import sys
from pathlib import Path

import queuecast
import queuecast.__main__


def test_main_module_has_correct_structure():
    """Test that __main__.py exposes main and sys."""
    assert hasattr(queuecast.__main__, 'main')
    assert hasattr(queuecast.__main__, 'sys')
    assert callable(queuecast.__main__.main)


def test_main_module_main_guard():
    """Test that the __main__ guard exists."""
    content = Path(queuecast.__main__.__file__).read_text(encoding='utf-8')

    assert 'if __name__ == "__main__":' in content
    assert 'sys.exit(main())' in content


def test_main_module_execution_via_subprocess():
    """Test that the package can be executed via python -m."""
    env = dict(os.environ)
    src_dir = str(Path(queuecast.__file__).resolve().parent.parent)
    env['PYTHONPATH'] = os.pathsep.join(filter(None, [src_dir, env.get('PYTHONPATH')]))

    result = subprocess.run(
        [sys.executable, '-m', 'queuecast', '--help'],
        capture_output=True,
        text=True,
        timeout=30,
        env=env,
    )

    assert result.returncode == 0
    assert 'usage: queuecast' in result.stdout.lower()
