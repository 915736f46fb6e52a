"""
Configuration Module - 配置文件解析和运行选项

配置来源：
1. ConfigLoader.DEFAULT_CONFIG（默认值）
2. <project_dir>/.xctasks/config.yaml（可选，递归合并）
3. 环境变量（仅在启动时读取一次，生成不可变的 RunOptions）
"""
import copy
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from ..lib.logger import get_logger
from .errors import ConfigError

DEFAULT_CONFIG_PATH = Path('.xctasks') / 'config.yaml'

# 环境变量名
ENV_DRY_RUN = "DRY_RUN"
ENV_XCODE_CONFIGURATION = "XCODE_CONFIGURATION"
ENV_VERBOSE = "verbose"
ENV_TRAVIS = "TRAVIS"
ENV_CI = "CI"
ENV_BUNDLE_PATH = "BUNDLE_PATH"
ENV_ENCRYPTION_KEY = "CONFIGURE_ENCRYPTION_KEY"


@dataclass(frozen=True)
class RunOptions:
    """单次运行的选项，启动时确定，运行中不再改变"""
    # 严格模式：依赖过期直接报错，不自动安装
    strict: bool = False
    # 不通过 xcpretty 格式化 xcodebuild 输出
    verbose: bool = False
    # 是否运行在 CI（输出 travis_fold 标记）
    ci: bool = False
    # 覆盖 xcode.configuration
    configuration_override: Optional[str] = None
    # 覆盖 dependencies.bundle_path
    bundle_path_override: Optional[str] = None
    # 是否提供了证书解密密钥
    encryption_key_set: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RunOptions":
        env = os.environ if environ is None else environ
        return cls(
            strict=bool(env.get(ENV_DRY_RUN)),
            verbose=bool(env.get(ENV_VERBOSE)),
            ci=ENV_TRAVIS in env or bool(env.get(ENV_CI)),
            configuration_override=env.get(ENV_XCODE_CONFIGURATION) or None,
            bundle_path_override=env.get(ENV_BUNDLE_PATH) or None,
            encryption_key_set=ENV_ENCRYPTION_KEY in env,
        )


@dataclass
class XcodeConfig:
    """xcodebuild 参数"""
    workspace: str = "WooCommerce.xcworkspace"
    scheme: str = "WooCommerce"
    configuration: str = "Debug"
    destination: str = "platform=iOS Simulator,name=iPhone 6s"
    sdk: str = "iphonesimulator"


@dataclass
class DependenciesConfig:
    """依赖检查与安装配置（路径相对于项目目录）"""
    gem_home: str = "vendor/gems"
    bundle_path: str = "vendor/bundle"
    bundle_jobs: int = 3
    bundle_retry: int = 3
    podfile: str = "Podfile"
    podfile_lock: str = "Podfile.lock"
    manifest_lock: str = "Pods/Manifest.lock"
    checksum_key: str = "PODFILE CHECKSUM"
    pods_dir: str = "Pods"
    # 本地证书仓库，存在 .git 时才需要应用证书
    secrets_repo: str = "~/.mobile-secrets"


@dataclass
class CodegenConfig:
    """Sourcery 代码生成配置"""
    sourcery_bin: str = "./Pods/Sourcery/bin/sourcery"
    copiable: List[str] = field(default_factory=list)
    copiable_config: str = ""
    fakes: List[str] = field(default_factory=list)
    fakes_config: str = ""


@dataclass
class BuildConfig:
    """完整配置"""
    project_dir: Path
    options: RunOptions = field(default_factory=RunOptions)
    xcode: XcodeConfig = field(default_factory=XcodeConfig)
    dependencies: DependenciesConfig = field(default_factory=DependenciesConfig)
    swiftlint_bin: str = "Pods/SwiftLint/swiftlint"
    codegen: CodegenConfig = field(default_factory=CodegenConfig)
    mocks_script: str = ""
    clobber: List[str] = field(default_factory=list)

    @property
    def strict(self) -> bool:
        return self.options.strict

    @property
    def configuration(self) -> str:
        """实际使用的 build configuration（环境变量优先）"""
        return self.options.configuration_override or self.xcode.configuration

    @property
    def bundle_path(self) -> str:
        return self.options.bundle_path_override or self.dependencies.bundle_path

    def path(self, relative: str) -> Path:
        """把配置中的路径解析为绝对路径"""
        p = Path(relative).expanduser()
        if p.is_absolute():
            return p
        return self.project_dir / p


class ConfigLoader:
    """配置加载器"""

    DEFAULT_CONFIG: Dict[str, Any] = {
        "xcode": {
            "workspace": "WooCommerce.xcworkspace",
            "scheme": "WooCommerce",
            "configuration": "Debug",
            "destination": "platform=iOS Simulator,name=iPhone 6s",
            "sdk": "iphonesimulator",
        },
        "dependencies": {
            "gem_home": "vendor/gems",
            "bundle_path": "vendor/bundle",
            "bundle_jobs": 3,
            "bundle_retry": 3,
            "podfile": "Podfile",
            "podfile_lock": "Podfile.lock",
            "manifest_lock": "Pods/Manifest.lock",
            "checksum_key": "PODFILE CHECKSUM",
            "pods_dir": "Pods",
            "secrets_repo": "~/.mobile-secrets",
        },
        "lint": {
            "swiftlint_bin": "Pods/SwiftLint/swiftlint",
        },
        "codegen": {
            "sourcery_bin": "./Pods/Sourcery/bin/sourcery",
            "copiable": ["Hardware", "Networking", "Storage", "Yosemite", "WooCommerce", "WooFoundation"],
            "copiable_config": "CodeGeneration/Sourcery/Copiable/{prefix}-Copiable.sourcery.yaml",
            "fakes": ["Hardware", "Networking", "Yosemite", "WooFoundation"],
            "fakes_config": "CodeGeneration/Sourcery/Fakes/{prefix}-Fakes.yaml",
        },
        "mocks": {
            "script": "./WooCommerce/WooCommerceUITests/Mocks/scripts/start.sh",
        },
        "clobber": ["vendor/gems", "vendor/bundle", ".bundle", "Pods", "vendor"],
    }

    def __init__(self, project_dir: str, config_path: Optional[str] = None,
                 environ: Optional[Mapping[str, str]] = None):
        self.project_dir = Path(project_dir).resolve()
        if config_path:
            self.config_path = Path(config_path)
        else:
            self.config_path = self.project_dir / DEFAULT_CONFIG_PATH
        self.environ = environ
        self._config: Dict[str, Any] = {}
        self.logger = get_logger("config")

    def load(self, strict: bool = False) -> BuildConfig:
        """加载配置文件并读取环境变量

        Args:
            strict: 强制严格模式（命令行 --dry-run）
        """
        self.logger.debug(f"Loading config from: {self.config_path}")

        self._config = copy.deepcopy(self.DEFAULT_CONFIG)

        if self.config_path.exists():
            user_config = self._read_user_config()
            self._merge_config(self._config, user_config)
            self.logger.debug(f"Merged {len(user_config)} user config keys")
        else:
            self.logger.debug("No config file found, using defaults only")

        options = RunOptions.from_env(self.environ)
        if strict and not options.strict:
            options = replace(options, strict=True)
        self.logger.log_dict("Run options", vars(options))

        return self._build_config(options)

    def _read_user_config(self) -> Dict[str, Any]:
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                user_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid config file {self.config_path}: {e}")

        if not isinstance(user_config, dict):
            raise ConfigError(f"Config file {self.config_path} must contain a mapping")
        return user_config

    def _merge_config(self, base: Dict, override: Dict):
        """递归合并配置"""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_config(base[key], value)
            else:
                base[key] = value

    def _build_config(self, options: RunOptions) -> BuildConfig:
        """构建 BuildConfig 对象（合并后每个键都有值，默认值只在 DEFAULT_CONFIG 中定义）"""
        xcode_cfg = self._section("xcode")
        xcode = XcodeConfig(
            workspace=str(xcode_cfg["workspace"]),
            scheme=str(xcode_cfg["scheme"]),
            configuration=str(xcode_cfg["configuration"]),
            destination=str(xcode_cfg["destination"]),
            sdk=str(xcode_cfg["sdk"]),
        )

        deps_cfg = self._section("dependencies")
        dependencies = DependenciesConfig(
            gem_home=deps_cfg["gem_home"],
            bundle_path=deps_cfg["bundle_path"],
            bundle_jobs=self._int_value("dependencies", "bundle_jobs"),
            bundle_retry=self._int_value("dependencies", "bundle_retry"),
            podfile=deps_cfg["podfile"],
            podfile_lock=deps_cfg["podfile_lock"],
            manifest_lock=deps_cfg["manifest_lock"],
            checksum_key=deps_cfg["checksum_key"],
            pods_dir=deps_cfg["pods_dir"],
            secrets_repo=deps_cfg["secrets_repo"],
        )

        codegen_cfg = self._section("codegen")
        codegen = CodegenConfig(
            sourcery_bin=codegen_cfg["sourcery_bin"],
            copiable=list(codegen_cfg["copiable"] or []),
            copiable_config=codegen_cfg["copiable_config"],
            fakes=list(codegen_cfg["fakes"] or []),
            fakes_config=codegen_cfg["fakes_config"],
        )

        return BuildConfig(
            project_dir=self.project_dir,
            options=options,
            xcode=xcode,
            dependencies=dependencies,
            swiftlint_bin=self._section("lint")["swiftlint_bin"],
            codegen=codegen,
            mocks_script=self._section("mocks")["script"],
            clobber=list(self._config["clobber"] or []),
        )

    def _section(self, name: str) -> Dict[str, Any]:
        value = self._config.get(name)
        if value is None:
            # `xcode:` 这样的空段落等同于未配置
            return self.DEFAULT_CONFIG[name]
        if not isinstance(value, dict):
            raise ConfigError(f"Config section '{name}' must be a mapping")
        return value

    def _int_value(self, section: str, key: str) -> int:
        value = self._section(section)[key]
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigError(
                f"Config value '{section}.{key}' must be an integer, got {value!r}",
                hint=f"Fix {self.config_path}",
            )
