"""xctasks

iOS 项目构建自动化：检查并安装工具链依赖（Bundler、Gems、CocoaPods、SwiftLint、证书），
封装 xcodebuild，驱动 Sourcery 代码生成。

主要模块:
- core/dependencies: 依赖新鲜度检查与安装编排
- core/tasks: 任务依赖图与项目任务
- core/xcode: xcodebuild 调用与 workspace 解析
- lib/logger: 统一日志
- wrapper: 命令行入口
"""
__version__ = "1.0.0"
