"""xctasks 核心模块

- checksum: Podfile 校验和比较
- config: 配置加载与运行选项
- shell: 外部命令执行
- dependencies: 依赖检查与安装编排
- xcode: xcodebuild 与 workspace 解析
- tasks: 任务依赖图与项目任务
"""
