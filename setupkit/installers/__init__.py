from .context import InstallContext, InstallerHandler
from .copy_install import CopyInstaller
from .custom_install import CustomInstaller
from .native_install import NATIVE_COMMANDS, NativeInstaller, is_native_kind, native_command
from .zip_install import ZipInstaller

__all__ = [
    "InstallContext",
    "InstallerHandler",
    "CopyInstaller",
    "CustomInstaller",
    "ZipInstaller",
    "NativeInstaller",
    "NATIVE_COMMANDS",
    "is_native_kind",
    "native_command",
]
