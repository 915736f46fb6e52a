"""xctasks Xcode 模块

- XcodeBuild: xcodebuild 调用封装
- XcodeWorkspace: workspace 解析与 configuration 校验
"""
from .xcodebuild import XcodeBuild, PROFILE_SWIFT_FLAGS
from .workspace import XcodeWorkspace, load_configuration_names

__all__ = [
    'XcodeBuild',
    'XcodeWorkspace',
    'PROFILE_SWIFT_FLAGS',
    'load_configuration_names',
]
