# SPDX-License-Identifier: MIT
"""Tests for mkninja.generators.launcher."""

import io
import os
import stat

from mkninja.core.config import GeneratorConfig
from mkninja.generators.launcher import LauncherScriptWriter


def render(vars, exports, config=None):
    f = io.StringIO()
    LauncherScriptWriter(config or GeneratorConfig()).write_script(f, vars, exports)
    return f.getvalue()


class TestLauncherScript:
    def test_minimal(self):
        assert render({}, {}) == "#!/bin/sh\nexec ninja\n"

    def test_shell_from_vars(self):
        script = render({"SHELL": "/bin/bash"}, {})
        assert script.startswith("#!/bin/bash\n")

    def test_shell_is_expanded(self):
        script = render({"SHELL": "$(BASH_PATH)", "BASH_PATH": "/usr/bin/bash"}, {})
        assert script.startswith("#!/usr/bin/bash\n")

    def test_empty_shell_uses_default(self):
        assert render({"SHELL": ""}, {}).startswith("#!/bin/sh\n")

    def test_exports_and_unsets(self):
        vars = {"CC": "$(PREFIX)gcc", "PREFIX": "arm-", "FOO": "bar"}
        exports = {"FOO": True, "BAZ": False, "CC": True}
        assert render(vars, exports) == (
            "#!/bin/sh\n"
            "unset BAZ\n"
            "export CC=arm-gcc\n"
            "export FOO=bar\n"
            "exec ninja\n"
        )

    def test_values_are_quoted(self):
        script = render({"CFLAGS": "-O2 -g"}, {"CFLAGS": True})
        assert "export CFLAGS='-O2 -g'\n" in script

    def test_undefined_export_is_empty(self):
        assert "export EMPTY=''\n" in render({}, {"EMPTY": True})

    def test_each_variable_once(self):
        exports = {"A": True, "B": False, "C": True}
        lines = render({"A": "1", "C": "3", "UNTRACKED": "x"}, exports).splitlines()
        names = [
            line.split()[1].partition("=")[0]
            for line in lines
            if line.startswith(("export ", "unset "))
        ]
        assert sorted(names) == ["A", "B", "C"]
        assert not any("UNTRACKED" in line for line in lines)

    def test_goma_parallelism(self):
        script = render({}, {}, GeneratorConfig(goma_dir="/goma"))
        assert script.endswith("exec ninja -j300\n")

    def test_suffix_selects_build_file(self):
        script = render({}, {}, GeneratorConfig(suffix="-arm", goma_dir="/goma"))
        assert script.endswith("exec ninja -f build-arm.ninja -j300\n")

    def test_build_file_outside_current_dir(self):
        writer = LauncherScriptWriter(GeneratorConfig())
        f = io.StringIO()
        writer.write_script(f, {}, {}, "out/build.ninja")
        assert f.getvalue().endswith("exec ninja -f out/build.ninja\n")

    def test_build_file_path_is_quoted(self):
        writer = LauncherScriptWriter(GeneratorConfig())
        cmd = writer.ninja_command("my out/build.ninja")
        assert cmd == ["ninja", "-f", "my out/build.ninja"]
        f = io.StringIO()
        writer.write_script(f, {}, {}, "my out/build.ninja")
        assert f.getvalue().endswith("exec ninja -f 'my out/build.ninja'\n")


class TestLauncherWrite:
    def test_executable(self, tmp_path):
        path = tmp_path / "ninja.sh"
        LauncherScriptWriter(GeneratorConfig()).write(path, {}, {"PATH": True})

        mode = os.stat(path).st_mode
        assert mode & stat.S_IXUSR
        assert stat.S_IMODE(mode) == 0o755
        assert path.read_text().startswith("#!/bin/sh\n")
