#!/usr/bin/env python3
"""
传输配置生成测试
"""

import pytest

from uftp_transfer.config import ConfigError, load_transfer_config
from uftp_transfer.generate import (
    build_groups,
    expand_filenames,
    generate_config,
    generate_dunkelflaute,
    PRESETS,
)
from uftp_transfer.main import generate_main


def test_oifs_filenames():
    names = expand_filenames(PRESETS['oifs']['pattern'], '2t', [1950], ['01', '12'], freq='3h')
    assert names == [
        "atm_reduced_3h_2t_3h_195001-195001.nc",
        "atm_reduced_3h_2t_3h_195012-195012.nc",
    ]


def test_pressure_level_and_fesom_filenames():
    pl = expand_filenames(PRESETS['oifs_pl']['pattern'], 'w_850', [2080], ['03'], freq='3h')
    fesom = expand_filenames(PRESETS['fesom']['pattern'], 'temp1-31', [2092], ['10'])
    assert pl == ["atm_reduced_3h_pl_w_850_3h_pl_208003-208003.nc"]
    assert fesom == ["temp1-31.fesom.2092_10.nc"]


def test_one_group_per_variable():
    groups = build_groups('oifs', ['2t', '10u'], 1950, 1951, '/local', '/remote')

    assert [g.name for g in groups] == ["OIFS 3h - 2t (1950-1951)", "OIFS 3h - 10u (1950-1951)"]
    assert all(len(g.files) == 24 for g in groups)
    assert groups[0].remote_base == '/remote'


def test_check_exists_filters_missing(tmp_path):
    existing = {str(tmp_path / "u1-31.fesom.2080_01.nc")}
    groups = build_groups(
        'fesom', ['u1-31'], 2080, 2080, str(tmp_path), '/remote',
        check_exists=True, exists=lambda p: p in existing
    )

    assert groups[0].name == "FESOM - u1-31 (2080-2080)"
    assert groups[0].files == ["u1-31.fesom.2080_01.nc"]


def test_invalid_years():
    with pytest.raises(ConfigError):
        build_groups('oifs', ['2t'], 1960, 1950, '/l', '/r')


def test_generated_config_loads(tmp_path):
    output = tmp_path / 'transfer.yaml'
    groups, stats = generate_config(
        'oifs', 'TCo1279-DART-1950C', ['2t'], 1950, 1950, str(output), months=['01', '02']
    )

    text = output.read_text()
    assert text.startswith("# UFTP Transfer Configuration")

    loaded = load_transfer_config(str(output))
    assert len(loaded) == 1
    assert loaded[0].files == groups[0].files
    assert loaded[0].local_base == "/scratch/awicm3/TCo1279-DART-1950C/outdata/oifs"
    assert loaded[0].remote_base == "/work/ab0995/ICCP_AWI_hackthon_2025/TCo1279-DART-1950C/outdata/oifs"


def test_dunkelflaute(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    group, output = generate_dunkelflaute('2080C', 2080, 2081, source='olaf', var='ssrd')

    assert output == "transfer_dunkelflaute_ssrd_2080C_2080_2081_olaf.yaml"
    assert group.local_base == "/arch/bm1344/awicm3/TCo1279-DART-2080C/outdata/oifs"
    assert len(group.files) == 24
    assert group.files[0] == "atm_reduced_3h_ssrd_3h_208001-208001.nc"
    assert load_transfer_config(output)[0].name == "TCo1279-DART-2080C ssrd 2080-2081 from olaf"


def test_dunkelflaute_unknown_source():
    with pytest.raises(ConfigError):
        generate_dunkelflaute('1950C', 1950, 1950, source='mistral')


def test_generate_main(tmp_path):
    output = tmp_path / 'fesom.yaml'
    code = generate_main([
        'files', '--preset', 'fesom', '--case', 'case', '--start-year', '2080',
        '--end-year', '2080', '--variables', 'MLD2', '-o', str(output)
    ])

    assert code == 0
    assert len(load_transfer_config(str(output))[0].files) == 12
    assert generate_main(['dunkelflaute', '1950C', '1950', '1950', 'nowhere', '-o',
                          str(tmp_path / 'x.yaml')]) == 1
