import pytest

from slate_docgen.config import build_configs, load_config_file, parse_key_value_pairs, split_list


class TestParsing:
    def test_split_list(self):
        assert split_list(" java, python ,,php") == ["java", "python", "php"]
        assert split_list(None) == []

    def test_key_value_pairs(self):
        assert parse_key_value_pairs("a=1,b=2,broken,=x,c=") == {"a": "1", "b": "2"}


class TestConfigFile:
    def test_yaml_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("apiPackage: com.acme.api\nadditionalProperties:\n  artifactId: acme\n  port: 8080\n")
        assert load_config_file(path) == {
            "api_package": "com.acme.api",
            "additional_properties": {"artifactId": "acme", "port": "8080"},
        }

    def test_json_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('{"modelPackage": "com.acme.model", "unknown": true}')
        assert load_config_file(path) == {"model_package": "com.acme.model"}

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- java\n")
        with pytest.raises(ValueError):
            load_config_file(path)


class TestBuildConfigs:
    def test_one_config_per_language_in_order(self):
        configs = build_configs("python,java,python")
        assert [c.lang for c in configs] == ["python", "java"]

    def test_explicit_values_override_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("apiPackage: from.file\nmodelPackage: model.file\nadditionalProperties:\n  a: '1'\n")
        configs = build_configs("java", path, api_package="from.cli", system_properties="b=2")
        assert configs[0].api_package == "from.cli"
        assert configs[0].model_package == "model.file"
        assert configs[0].additional_properties == {"a": "1", "b": "2"}
