from .step_10_install_packages import InstallPackagesStep
from .step_20_python_env import PythonEnvStep
from .step_30_build_tools import BuildToolStep, build_tool_steps
from .step_40_install_fonts import InstallFontsStep
from .step_50_install_shell import InstallShellStep
from .step_60_configure_services import ConfigureServicesStep
from .step_70_configure_environment import ConfigureEnvironmentStep
from .step_80_verify import VerifyStep, verify_and_report
from .step_90_launch import LaunchShellStep

__all__ = [
    "InstallPackagesStep",
    "PythonEnvStep",
    "BuildToolStep",
    "build_tool_steps",
    "InstallFontsStep",
    "InstallShellStep",
    "ConfigureServicesStep",
    "ConfigureEnvironmentStep",
    "VerifyStep",
    "verify_and_report",
    "LaunchShellStep",
]
