#!/usr/bin/env python3
"""
传输状态检查测试
"""

import os

from uftp_transfer.config import TransferGroup
from uftp_transfer.status import check_transfer, print_report
from uftp_transfer.main import check_main


def _write_config(path, remote_base, files):
    lines = [
        "transfers:",
        '  - name: "FESOM - temp"',
        '    local_dir: "/scratch/awicm3/case/outdata/fesom/"',
        f'    remote_base: "{remote_base}"',
        "    files:",
    ] + [f'      - "{f}"' for f in files]
    path.write_text("\n".join(lines) + "\n")


def test_found_and_missing(tmp_path):
    """10 个文件中 7 个存在：found=7, missing=3，报告只写 3 个完整路径"""
    remote_base = tmp_path / 'remote'
    remote_base.mkdir()
    files = [f"temp.fesom.2080_{m:02d}.nc" for m in range(1, 11)]
    for f in files[:7]:
        (remote_base / f).write_text('x')

    report = check_transfer([TransferGroup('FESOM', '/scratch', str(remote_base), files)])

    assert report.found == 7
    assert report.missing == 3

    report_file = tmp_path / 'missing_files.txt'
    assert report.write_missing_report(str(report_file)) == 3
    assert report_file.read_text().splitlines() == [
        os.path.join(str(remote_base), f) for f in files[7:]
    ]


def test_dataframe_summary():
    groups = [
        TransferGroup('a', '/l', '/r1', ['x.nc', 'y.nc']),
        TransferGroup('b', '/l', '/r2', ['z.nc']),
    ]
    report = check_transfer(groups, exists=lambda p: p == '/r1/x.nc')
    df = report.to_dataframe()

    assert list(df['found']) == [1, 0]
    assert list(df['missing']) == [1, 1]
    assert list(df['completion_pct']) == [50.0, 0.0]


def test_print_report_truncates_long_lists(capsys):
    files = [f"f{i}.nc" for i in range(25)]
    report = check_transfer([TransferGroup('a', '/l', '/r', files)], exists=lambda p: False)

    print_report(report, show='missing', max_listed=20)
    out = capsys.readouterr().out

    assert "25 个文件缺失" in out
    assert "- f9.nc" in out
    assert "- f10.nc" not in out


def test_check_main_exit_codes(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    remote_base = tmp_path / 'remote'
    remote_base.mkdir()
    (remote_base / 'a.nc').write_text('x')

    complete = tmp_path / 'complete.yaml'
    _write_config(complete, remote_base, ['a.nc'])
    assert check_main([str(complete)]) == 0
    assert not (tmp_path / 'missing_files.txt').exists()

    partial = tmp_path / 'partial.yaml'
    _write_config(partial, remote_base, ['a.nc', 'b.nc'])
    assert check_main([str(partial), '--summary-csv', 'status.csv']) == 1
    assert (tmp_path / 'missing_files.txt').read_text() == f"{remote_base}/b.nc\n"
    assert (tmp_path / 'status.csv').exists()


def test_check_main_missing_config(tmp_path):
    assert check_main([str(tmp_path / 'nope.yaml')]) == 1
