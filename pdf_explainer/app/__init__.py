"""应用入口模块（命令行与HTTP服务）."""
