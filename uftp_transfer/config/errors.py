class ConfigError(ValueError):
    """配置文件缺失或格式错误"""
