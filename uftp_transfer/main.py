"""
主入口程序

uftp-upload    上传文件（断点续传 / MD5 校验）
uftp-check     在目标系统上检查哪些文件已经传输
uftp-genconfig 生成传输配置
"""

import os
import sys
import shutil
import logging
import argparse

from uftp_transfer.config import (
    ConfigError,
    EXAMPLE_CONFIG,
    load_settings,
    load_transfer_config
)
from uftp_transfer.transfer import (
    UFTPClient,
    TransferManager,
    UploadState,
    default_state_file
)
from uftp_transfer.status import check_transfer, print_report
from uftp_transfer.generate import MONTHS, PRESETS, generate_config, generate_dunkelflaute
from uftp_transfer.io import save_csv
from uftp_transfer.utils import setup_logging

logger = logging.getLogger('uftp_transfer')


def _add_logging_args(parser):
    log_group = parser.add_argument_group('日志')
    log_group.add_argument("--log-file", default=None,
                           help="日志文件（默认输出到控制台）")
    log_group.add_argument("-v", "--verbose", action='store_true',
                           help="输出详细日志")


def _configure_logging(args):
    # 控制台已有进度输出，默认只显示错误；写文件时记录每个文件的结果
    if args.verbose:
        level = logging.DEBUG
    elif args.log_file:
        level = logging.INFO
    else:
        level = logging.ERROR
    setup_logging(args.log_file, level)


def get_upload_args(argv=None):
    """解析 uftp-upload 命令行参数"""
    parser = argparse.ArgumentParser(
        prog="uftp-upload",
        description="通过 UFTP 上传文件到 DKRZ Levante，支持断点续传、自动重试和 MD5 校验",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        epilog="配置文件格式:\n\n" + EXAMPLE_CONFIG
    )

    parser.add_argument("config_file", nargs='?', default="upload_config.yaml",
                        help="YAML 传输配置文件")
    parser.add_argument("--settings", default=None,
                        help="参数文件（覆盖包内默认参数）")

    uftp_group = parser.add_argument_group('UFTP 参数')
    uftp_group.add_argument("--user", default=None, help="远程用户名（-u）")
    uftp_group.add_argument("--key", default=None, help="身份密钥文件（-i）")
    uftp_group.add_argument("--auth-server", default=None, help="UFTP 认证服务器地址")
    uftp_group.add_argument("--threads", type=int, default=None, help="并行 FTP 连接数（-t）")
    uftp_group.add_argument("--streams", type=int, default=None, help="每个连接的 TCP 流数（-n）")
    uftp_group.add_argument("--executable", default=None, help="uftp 可执行文件")

    upload_group = parser.add_argument_group('上传控制')
    upload_group.add_argument("--max-retries", type=int, default=None,
                              help="每个文件的最大尝试次数")
    upload_group.add_argument("--retry-delay", type=float, default=None,
                              help="重试间隔（秒）")
    upload_group.add_argument("--verify", action='store_true',
                              help="上传后比对 MD5 校验和（默认不记录断点）")
    upload_group.add_argument("--resume", dest='resume', action='store_const', const=True,
                              default=None, help="跳过已上传的文件（不使用 --verify 时默认开启）")
    upload_group.add_argument("--no-resume", dest='resume', action='store_const', const=False,
                              help="忽略上传状态，全部重新上传")

    state_group = parser.add_argument_group('断点续传控制')
    state_group.add_argument("--state-file", default=None,
                             help="上传状态文件（默认: <配置目录>/.<配置名>.upload_state.json）")
    state_group.add_argument("--reset", action='store_true',
                             help="清空上传状态，从头开始")
    state_group.add_argument("--show-progress", action='store_true',
                             help="只显示当前上传状态，不运行")

    _add_logging_args(parser)

    return parser.parse_args(argv)


def _preflight(settings) -> bool:
    """检查 uftp、密钥和用户名"""
    uftp = settings['uftp']

    if shutil.which(uftp['executable']) is None:
        print(f"❌ 找不到 uftp 命令: {uftp['executable']}")
        return False

    if not uftp.get('key') or not os.path.isfile(uftp['key']):
        print(f"❌ UFTP 密钥文件不存在: {uftp.get('key')}")
        return False

    if not uftp.get('user'):
        print("❌ 未设置 UFTP 用户名（--user 或 UFTP_USER）")
        return False

    return True


def main(argv=None) -> int:
    """
    上传主流程

    返回：
    ----------
    int
        0 表示全部成功，1 表示有失败
    """
    args = get_upload_args(argv)
    _configure_logging(args)

    try:
        settings = load_settings(args.settings)
    except ConfigError as e:
        print(f"❌ {e}")
        return 1

    uftp = settings['uftp']
    upload = settings['upload']
    for key, value in [('user', args.user), ('key', args.key), ('auth_server', args.auth_server),
                       ('threads', args.threads), ('streams', args.streams),
                       ('executable', args.executable)]:
        if value is not None:
            uftp[key] = os.path.expanduser(value) if key == 'key' else value
    if args.max_retries is not None:
        upload['max_retries'] = args.max_retries
    if args.retry_delay is not None:
        upload['retry_delay'] = args.retry_delay

    resume = args.resume if args.resume is not None else not args.verify
    state_file = args.state_file or default_state_file(args.config_file)

    if args.reset or args.show_progress:
        state = UploadState(state_file)
        if args.reset:
            state.reset()
        if args.show_progress:
            state.print_status()
            return 0

    print("\n" + "=" * 80)
    print("UFTP 上传" + ("（MD5 校验）" if args.verify else ""))
    print("=" * 80)
    print(f"配置文件:   {args.config_file}")
    print(f"FTP 连接数: {uftp['threads']}, TCP 流数: {uftp['streams']}, "
          f"最大尝试次数: {upload['max_retries']}")

    if not os.path.isfile(args.config_file):
        print(f"\n❌ 配置文件不存在: {args.config_file}")
        print("\n请按以下格式创建 YAML 配置文件:\n")
        print(EXAMPLE_CONFIG)
        return 1

    try:
        groups = load_transfer_config(args.config_file)
    except ConfigError as e:
        print(f"❌ {e}")
        return 1

    if not _preflight(settings):
        return 1

    print(f"密钥:       {uftp['key']}")
    print(f"用户:       {uftp['user']}")
    if resume:
        print(f"状态文件:   {state_file}")
    print("=" * 80)

    client = UFTPClient(
        auth_server=uftp['auth_server'],
        user=uftp['user'],
        key_file=uftp['key'],
        threads=uftp['threads'],
        streams=uftp['streams'],
        executable=uftp['executable']
    )
    try:
        manager = TransferManager(
            client,
            state=UploadState(state_file) if resume else None,
            verify=args.verify,
            max_retries=upload['max_retries'],
            retry_delay=upload['retry_delay'],
            checksum_algorithm=upload.get('checksum_algorithm', 'MD5')
        )
    except ValueError as e:
        print(f"❌ {e}")
        return 1

    summary = manager.run(groups)
    summary.print_summary(verify=args.verify)

    if summary.exit_code != 0:
        print("❌ 部分文件上传或校验失败！重新运行即可继续")
    else:
        print("🎉 所有文件上传完成！")

    return summary.exit_code


def get_check_args(argv=None):
    """解析 uftp-check 命令行参数"""
    parser = argparse.ArgumentParser(
        prog="uftp-check",
        description="检查传输配置中的文件是否已存在于目标系统（在 Levante 上运行）",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("config_file", nargs='?', default="configs/transfer_config_custom.yaml",
                        help="YAML 传输配置文件")
    parser.add_argument("--settings", default=None,
                        help="参数文件（覆盖包内默认参数）")
    parser.add_argument("--show", choices=['missing', 'found', 'all'], default='missing',
                        help="列出哪些文件")
    parser.add_argument("--missing-report", default=None,
                        help="缺失文件列表（默认取参数文件中的 check.missing_report）")
    parser.add_argument("--summary-csv", default=None,
                        help="每个传输块的统计表（CSV）")
    parser.add_argument("--progress", action='store_true',
                        help="显示进度条")
    _add_logging_args(parser)

    return parser.parse_args(argv)


def check_main(argv=None) -> int:
    """检查传输状态，有缺失文件时返回 1"""
    args = get_check_args(argv)
    _configure_logging(args)

    print("\n=== 传输状态检查 ===")
    print(f"配置文件: {args.config_file}")

    if not os.path.isfile(args.config_file):
        print(f"❌ 配置文件不存在: {args.config_file}")
        return 1

    try:
        settings = load_settings(args.settings)
        groups = load_transfer_config(args.config_file)
    except ConfigError as e:
        print(f"❌ {e}")
        return 1

    check = settings.get('check', {})
    report = check_transfer(groups, progress=args.progress)
    print_report(report, show=args.show, max_listed=check.get('max_listed', 20))

    if args.summary_csv:
        save_csv(report.to_dataframe(), args.summary_csv, index=False)

    if report.missing == 0:
        print("\n✅ 所有文件均已传输！")
        return 0

    missing_report = args.missing_report or check.get('missing_report', 'missing_files.txt')
    report.write_missing_report(missing_report)
    print(f"\n⚠️  {report.missing} 个文件尚未传输")
    print(f"缺失文件列表已保存至: {missing_report}")
    return 1


def get_generate_args(argv=None):
    """解析 uftp-genconfig 命令行参数"""
    parser = argparse.ArgumentParser(
        prog="uftp-genconfig",
        description="按 变量 × 年 × 月 生成传输配置",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    files_parser = subparsers.add_parser(
        'files', help="OIFS / FESOM 模型输出",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    files_parser.add_argument("--preset", choices=sorted(PRESETS), default='oifs',
                              help="文件命名规则")
    files_parser.add_argument("--case", default="TCo1279-DART-1950C", help="模型 case 名称")
    files_parser.add_argument("--start-year", type=int, default=1950, help="起始年份")
    files_parser.add_argument("--end-year", type=int, default=1969, help="结束年份")
    files_parser.add_argument("--variables", nargs='+', default=["2t", "10u"], help="变量")
    files_parser.add_argument("--months", nargs='+', default=MONTHS, help="月份（两位数字）")
    files_parser.add_argument("--freq", default="3h", help="输出频率（FESOM 不使用）")
    files_parser.add_argument("--local-base", default=None, help="本地根目录")
    files_parser.add_argument("--remote-base", default=None, help="远程根目录")
    files_parser.add_argument("--check-exists", action='store_true',
                              help="只保留本地存在的文件")
    files_parser.add_argument("-o", "--output", default="transfer_config_custom.yaml",
                              help="输出 YAML 文件")

    dunkel_parser = subparsers.add_parser(
        'dunkelflaute', help="dunkelflaute 辐射变量（tsr, ssrd）",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    dunkel_parser.add_argument("scenario", nargs='?', default="1950C", help="情景（1950C, 2080C）")
    dunkel_parser.add_argument("start_year", nargs='?', type=int, default=1950, help="起始年份")
    dunkel_parser.add_argument("end_year", nargs='?', type=int, default=1969, help="结束年份")
    dunkel_parser.add_argument("source", nargs='?', default="aleph", help="源系统（aleph, olaf）")
    dunkel_parser.add_argument("variable", nargs='?', default="tsr", help="变量（tsr, ssrd）")
    dunkel_parser.add_argument("-o", "--output", default=None, help="输出 YAML 文件")

    _add_logging_args(parser)

    return parser.parse_args(argv)


def generate_main(argv=None) -> int:
    """生成传输配置"""
    args = get_generate_args(argv)
    _configure_logging(args)

    try:
        if args.command == 'dunkelflaute':
            generate_dunkelflaute(
                args.scenario, args.start_year, args.end_year,
                source=args.source, var=args.variable, output_file=args.output
            )
        else:
            generate_config(
                args.preset, args.case, args.variables, args.start_year, args.end_year,
                args.output,
                local_base=args.local_base,
                remote_base=args.remote_base,
                months=args.months,
                freq=args.freq,
                check_exists=args.check_exists
            )
    except ConfigError as e:
        print(f"❌ {e}")
        return 1

    print("\n💡 下一步:")
    print("  1. 检查生成的配置文件")
    print("  2. 上传: uftp-upload <配置文件>")
    return 0


if __name__ == "__main__":
    sys.exit(main())
