# Author: Christian Brodbeck <christianbrodbeck@nyu.edu>
import logging

import pytest

from lingplot.__main__ import get_parser, main
from lingplot.testing import hide_plots, working_directory


def test_new_and_check(tmp_path, capsys):
    "Test the new and check commands"
    assert main(['new', str(tmp_path), 'lexdec', '--title', 'Lexical decision', '--author', 'A. Student']) == 0
    root = tmp_path / 'lexdec'
    assert capsys.readouterr().out == f"Created {root}\n"
    assert (root / 'README.md').read_text().startswith('# Lexical decision')

    assert main(['check', str(root)]) == 0
    assert 'project layout OK' in capsys.readouterr().out

    (root / 'notes.txt').write_text('')
    assert main(['check', str(root)]) == 1
    out = capsys.readouterr().out
    assert 'Unexpected entries: notes.txt' in out

    # existing project
    assert main(['new', str(tmp_path), 'lexdec']) == 1
    assert 'exist_ok' in capsys.readouterr().err
    assert main(['new', str(tmp_path), 'lexdec', '--exist-ok']) == 0

    assert main(['check', str(tmp_path / 'missing')]) == 1
    assert 'does not exist' in capsys.readouterr().err

    # relative path
    with working_directory(root):
        assert main(['check', '.']) == 1
    assert 'notes.txt' in capsys.readouterr().out


@hide_plots
def test_tutorial_command(tmp_path, capsys):
    assert main(['tutorial', str(tmp_path), '--format', 'png', '--step', 'rt-histogram', '--step', 'rt-violin']) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == [str(tmp_path / 'rt-histogram.png'), str(tmp_path / 'rt-violin.png')]


def test_parser():
    parser = get_parser()
    args = parser.parse_args(['--log-level', 'debug', 'check', '.'])
    assert args.log_level == 'DEBUG'
    assert args.root == '.'
    with pytest.raises(SystemExit):
        parser.parse_args(['tutorial', '.', '--step', 'rt-pie-chart'])
    with pytest.raises(SystemExit):
        parser.parse_args([])
    # the handler is removed after the command
    n_handlers = len(logging.getLogger('lingplot').handlers)
    main(['check', '.'])
    assert len(logging.getLogger('lingplot').handlers) == n_handlers
