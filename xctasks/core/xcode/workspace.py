"""
Xcode Workspace Module - workspace / 项目解析

从 .xcworkspace 中找出包含的 .xcodeproj，并用 pbxproj 读取 build configuration，
用于在调用 xcodebuild 之前校验 configuration 名称。
"""
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Optional

from pbxproj import XcodeProject

from ...lib.logger import get_logger
from ..errors import ConfigError


class XcodeWorkspace:
    """Xcode workspace 解析"""

    def __init__(self, workspace_path: Path):
        self.workspace_path = Path(workspace_path)
        self.logger = get_logger("xcode")

    def exists(self) -> bool:
        return (self.workspace_path / 'contents.xcworkspacedata').is_file()

    def project_paths(self) -> List[Path]:
        """workspace 中的所有 .xcodeproj（跳过 Pods）"""
        contents_path = self.workspace_path / 'contents.xcworkspacedata'
        if not contents_path.exists():
            return []

        try:
            root = ET.parse(contents_path).getroot()
        except ET.ParseError as e:
            self.logger.warning(f"Failed to parse workspace {contents_path}: {e}")
            return []

        projects = []
        for file_ref in root.findall('.//FileRef'):
            location = file_ref.get('location', '')
            rel_path = None
            if location.startswith('group:'):
                rel_path = location[len('group:'):]
            elif location.startswith('container:'):
                rel_path = location[len('container:'):]

            if rel_path:
                full_path = self.workspace_path.parent / rel_path
                if full_path.suffix == '.xcodeproj' and full_path.stem != 'Pods' and full_path.exists():
                    projects.append(full_path)

        self.logger.debug(f"Projects in workspace: {[p.stem for p in projects]}")
        return projects

    def configuration_names(self) -> List[str]:
        """所有项目中出现过的 build configuration 名称（去重、保持顺序）"""
        names: List[str] = []
        for xcodeproj in self.project_paths():
            for name in load_configuration_names(xcodeproj):
                if name not in names:
                    names.append(name)
        return names

    def validate_configuration(self, configuration: str) -> Optional[List[str]]:
        """
        校验 configuration 是否存在于 workspace 的项目中

        Returns:
            可用的 configuration 列表；无法解析 workspace 时返回 None（跳过校验）
        """
        if not self.exists():
            self.logger.debug(f"Workspace not found, skipping configuration check: {self.workspace_path}")
            return None

        names = self.configuration_names()
        if not names:
            self.logger.debug("No build configurations found, skipping configuration check")
            return None

        if configuration not in names:
            raise ConfigError(
                f"Build configuration '{configuration}' not found in {self.workspace_path.name}.",
                hint=f"Available configurations: {', '.join(names)}.",
            )
        return names


def load_configuration_names(xcodeproj: Path) -> List[str]:
    """读取单个 .xcodeproj 中的 build configuration 名称"""
    logger = get_logger("xcode")
    pbxproj_path = Path(xcodeproj) / 'project.pbxproj'
    if not pbxproj_path.exists():
        logger.debug(f"Project file not found: {pbxproj_path}")
        return []

    try:
        project = XcodeProject.load(str(pbxproj_path))
    except Exception as e:
        logger.exception(f"Failed to load project: {e}")
        raise ConfigError(
            f"Failed to load Xcode project {pbxproj_path}: {e}",
            hint="Resolve merge conflicts in project.pbxproj or restore it from version control.",
        ) from e

    names = []
    for configuration in project.objects.get_objects_in_section('XCBuildConfiguration'):
        name = str(configuration.name)
        if name not in names:
            names.append(name)
    logger.debug(f"{Path(xcodeproj).stem}: configurations {names}")
    return names
