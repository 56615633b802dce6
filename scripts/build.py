#!/usr/bin/env python3
"""
Build script for the POS Lambda functions.

Every directory under src/ holding a lambda_function.py becomes
build/<function>.zip, bundled with the shared pos_service package.
"""
import os
import shutil
import subprocess
import sys
import zipfile
from pathlib import Path

SHARED_PACKAGE = "pos_service"


def find_functions(src_dir: Path) -> list:
    """Entry-point directories, sorted by name."""
    return sorted(
        d for d in src_dir.iterdir()
        if d.is_dir() and (d / "lambda_function.py").exists()
    )


def bundle_function(function_dir: Path, src_dir: Path, build_dir: Path) -> Path:
    """Stage one function with the shared package and zip it."""
    function_name = function_dir.name
    zip_path = build_dir / f"{function_name}.zip"

    temp_dir = build_dir / f"temp_{function_name}"
    if temp_dir.exists():
        shutil.rmtree(temp_dir)
    temp_dir.mkdir()

    shutil.copytree(function_dir, temp_dir, dirs_exist_ok=True)
    shutil.copytree(
        src_dir / SHARED_PACKAGE,
        temp_dir / SHARED_PACKAGE,
        ignore=shutil.ignore_patterns("__pycache__", "*.pyc"),
    )

    requirements_file = function_dir / "requirements.txt"
    if requirements_file.exists():
        print(f"Installing dependencies for {function_name}...")
        subprocess.run([
            sys.executable, "-m", "pip", "install",
            "-r", str(requirements_file),
            "-t", str(temp_dir),
        ], check=True)

    print(f"Creating {function_name}.zip...")
    with zipfile.ZipFile(zip_path, 'w', zipfile.ZIP_DEFLATED) as zipf:
        for root, _, files in os.walk(temp_dir):
            for file in files:
                file_path = Path(root) / file
                zipf.write(file_path, file_path.relative_to(temp_dir))

    shutil.rmtree(temp_dir)
    return zip_path


def main():
    """Main build function"""
    project_root = Path(__file__).parent.parent
    src_dir = project_root / "src"
    build_dir = project_root / "build"
    build_dir.mkdir(exist_ok=True)

    functions = find_functions(src_dir)
    print(f"Building Lambda functions: {[f.name for f in functions]}")

    for function_dir in functions:
        zip_path = bundle_function(function_dir, src_dir, build_dir)
        print(f"{function_dir.name}.zip created ({zip_path.stat().st_size} bytes)")

    print("Build complete!")


if __name__ == "__main__":
    main()
