"""Tests for the *.Target.cs / *.Build.cs rules scanner."""

from pathlib import Path

import pytest

from buildplan.errors import DeclarationError
from buildplan.models import BuildType, SettingKey
from buildplan.scanner import collect_strings, scan_rules

FIXTURES = Path(__file__).parent / "fixtures"
RULES = FIXTURES / "rules"


class TestCollectStrings:
    def test_add_range_and_add(self):
        text = '''
            PublicDependencyModuleNames.AddRange(new string[] { "Core", "Engine" });
            PrivateDependencyModuleNames.Add("Slate");
            PublicDependencyModuleNames.Add("Core");
        '''
        props = ("PublicDependencyModuleNames", "PrivateDependencyModuleNames")
        assert collect_strings(text, props) == ["Core", "Engine", "Slate"]

    def test_list_initializer(self):
        text = 'ExtraModuleNames.AddRange(new List<string>() { "A", "B" });'
        assert collect_strings(text, ("ExtraModuleNames",)) == ["A", "B"]

    def test_unrelated_property_ignored(self):
        text = 'PublicIncludePaths.Add("Public");'
        assert collect_strings(text, ("PublicDefinitions",)) == []


class TestScanRules:
    def test_target(self):
        decls = scan_rules(RULES)
        assert len(decls.targets) == 1
        target = decls.targets[0].to_target()
        assert target.name == "MulticopterSim"
        assert target.build_type is BuildType.GAME
        # the commented-out Add is ignored
        assert target.modules == ("MainModule", "SocketModule")

    def test_modules(self):
        decls = scan_rules(RULES)
        by_name = {m.name: m.to_module() for m in decls.modules}
        assert set(by_name) == {"MainModule", "SocketModule"}

        main = by_name["MainModule"]
        assert main.dependencies == ("Core", "Engine")
        assert main.sources == (
            "Source/MainModule/Private/FlightManager.cpp",
            "Source/MainModule/Vehicle.cpp",
            "Source/MainModule/Vehicle.hpp",
        )
        assert main.settings.include_paths == ("MainModule/Public",)
        assert main.settings.definitions == (("MAIN_MODULE", "1"),)
        assert main.settings.scalar(SettingKey.CPP_STANDARD) == "c++17"
        assert main.settings.scalar(SettingKey.PCH_USAGE) == "UseExplicitOrSharedPCHs"

        socket = by_name["SocketModule"]
        assert socket.dependencies == ("Core", "MainModule", "Sockets")
        assert socket.settings.link_libraries == ("ws2_32.lib",)

    def test_nested_module_sources_not_shared(self, tmp_path):
        outer = tmp_path / "Outer"
        inner = outer / "Inner"
        inner.mkdir(parents=True)
        (outer / "Outer.Build.cs").write_text("class Outer {}")
        (outer / "outer.cpp").write_text("")
        (inner / "Inner.Build.cs").write_text("class Inner {}")
        (inner / "inner.cpp").write_text("")
        by_name = {m.name: m for m in scan_rules(tmp_path).modules}
        assert by_name["Outer"].sources == ["outer.cpp"]
        assert by_name["Inner"].sources == ["inner.cpp"]

    def test_invalid_target_type(self, tmp_path):
        (tmp_path / "Tool.Target.cs").write_text("Type = TargetType.Program;")
        with pytest.raises(DeclarationError, match="Tool.Target.cs"):
            scan_rules(tmp_path)
