"""
Checksum Module - Podfile 校验和与锁文件比较

CocoaPods 在 Podfile.lock 的 `PODFILE CHECKSUM` 字段中记录 Podfile 的 SHA-1，
pod install 完成后会把 Podfile.lock 复制为 Pods/Manifest.lock。
三者一致即认为本地 Pods 是最新的。
"""
import filecmp
import hashlib
from pathlib import Path
from typing import Optional, Union

import yaml

PODFILE_CHECKSUM_KEY = "PODFILE CHECKSUM"

_CHUNK_SIZE = 64 * 1024

PathLike = Union[str, Path]


def compute_hash(path: PathLike) -> str:
    """计算文件内容的 SHA-1（十六进制）"""
    digest = hashlib.sha1()
    with open(path, 'rb') as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b''):
            digest.update(chunk)
    return digest.hexdigest()


def read_recorded_hash(lockfile: PathLike, key: str = PODFILE_CHECKSUM_KEY) -> Optional[str]:
    """
    从 YAML 格式的锁文件中读取记录的校验和

    Args:
        lockfile: 锁文件路径（通常是 Podfile.lock）
        key: 字段名

    Returns:
        校验和字符串；文件不存在、无法解析或没有该字段时返回 None
    """
    path = Path(lockfile)
    if not path.is_file():
        return None

    try:
        with open(path, 'r', encoding='utf-8') as f:
            # 所有标量按字符串读取
            data = yaml.load(f, Loader=yaml.BaseLoader)
    except (yaml.YAMLError, UnicodeDecodeError):
        return None

    if not isinstance(data, dict):
        return None

    value = data.get(key)
    if value is None:
        return None
    return str(value)


def files_byte_equal(a: PathLike, b: PathLike) -> bool:
    """逐字节比较两个文件，任一不存在时返回 False"""
    if not Path(a).is_file() or not Path(b).is_file():
        return False
    return filecmp.cmp(str(a), str(b), shallow=False)


def manifest_matches_lock(manifest: PathLike, lockfile: PathLike,
                          key: str = PODFILE_CHECKSUM_KEY) -> bool:
    """Podfile 的当前校验和是否等于 Podfile.lock 中记录的值"""
    if not Path(manifest).is_file():
        return False
    recorded = read_recorded_hash(lockfile, key)
    if recorded is None:
        return False
    return compute_hash(manifest) == recorded
