# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""
Unit tests for the pod template parser.
"""
import pytest
from podtmpl.PARSERS.template_parser import TemplateParser
from podtmpl.UTILS.string_interpolation import TemplateInterpolator
from podtmpl.errors import TemplateError

POD_TEMPLATE = """
acKind: PodManifest
acVersion: 0.8.11
apps:
  - name: web
    image:
      name: nginx
      labels:
        - name: schema
          value: docker://
        - name: version
          value: "1.21"
    app:
      exec: ["/usr/sbin/nginx", "-g", "daemon off;"]
      user: www
    annotations:
      - name: team
        value: infra
volumes:
  - name: html
    kind: host
    source: ./html
    readOnly: true
ports:
  - name: http
    hostPort: 8080
"""


class TestTemplateParser:
    """Tests for TemplateParser."""

    def test_parse(self, template):
        """Test parsing a complete template."""
        manifest = TemplateParser(context={}).parse(template(POD_TEMPLATE))
        assert manifest.ac_kind == "PodManifest"
        assert len(manifest.apps) == 1
        app = manifest.apps[0]
        assert app.name == "web"
        assert app.image.name == "nginx"
        assert app.image.id is None
        assert app.image.label("schema") == "docker://"
        assert app.image.label("version") == "1.21"
        assert app.app.exec_ == ["/usr/sbin/nginx", "-g", "daemon off;"]
        assert app.app.user == "www"
        assert app.app.group == ""
        assert manifest.volumes[0].source == "./html"
        assert manifest.volumes[0].read_only is True

    def test_unknown_keys_preserved(self, template):
        """Test that keys outside the model survive parsing."""
        manifest = TemplateParser(context={}).parse(template(POD_TEMPLATE))
        assert manifest.model_extra["ports"] == [{"name": "http", "hostPort": 8080}]
        assert manifest.apps[0].model_extra["annotations"][0]["value"] == "infra"

    def test_labels_as_mapping(self):
        """Test that labels may be written as a mapping."""
        content = "apps:\n  - name: foo\n    image:\n      name: foo\n      labels:\n        schema: docker://\n        version: 3\n"
        manifest = TemplateParser(context={}).parse_from_string(content)
        image = manifest.apps[0].image
        assert [label.name for label in image.labels] == ["schema", "version"]
        assert image.label("version") == "3"

    def test_numeric_user_and_group(self):
        """Test that numeric ids from YAML become strings."""
        content = "apps:\n  - name: foo\n    app:\n      user: 1000\n      group: 100\n"
        manifest = TemplateParser(context={}).parse_from_string(content)
        assert manifest.apps[0].app.user == "1000"
        assert manifest.apps[0].app.group == "100"

    def test_missing_app_section(self):
        """Test that an app without an app section gets empty execution settings."""
        manifest = TemplateParser(context={}).parse_from_string("apps:\n  - name: foo\n")
        assert manifest.apps[0].app.user == ""

    def test_empty_document(self):
        """Test that an empty document is a blank manifest."""
        manifest = TemplateParser(context={}).parse_from_string("")
        assert manifest.apps == []
        assert manifest.volumes == []
        assert manifest.ac_kind == "PodManifest"

    def test_missing_file_raises(self, tmp_path):
        """Test that a missing template raises TemplateError."""
        with pytest.raises(TemplateError):
            TemplateParser(context={}).parse(str(tmp_path / "nope.yaml"))

    def test_invalid_yaml_raises(self):
        """Test that malformed YAML raises TemplateError."""
        with pytest.raises(TemplateError):
            TemplateParser(context={}).parse_from_string("apps: [unclosed")

    def test_non_mapping_raises(self):
        """Test that a top-level list is rejected."""
        with pytest.raises(TemplateError):
            TemplateParser(context={}).parse_from_string("- a\n- b\n")

    def test_wrong_shape_raises(self):
        """Test that an app without a name is rejected."""
        with pytest.raises(TemplateError):
            TemplateParser(context={}).parse_from_string("apps:\n  - image:\n      name: foo\n")

    def test_interpolation(self):
        """Test that variables from the context are substituted."""
        parser = TemplateParser(context={"VERSION": "2.0"}, interpolate=True)
        manifest = parser.parse_from_string(
            "apps:\n  - name: foo\n    image:\n      name: foo\n      labels:\n        version: ${VERSION}\n")
        assert manifest.apps[0].image.label("version") == "2.0"

    def test_unset_variable_raises(self):
        """Test that an unset variable without default is an error."""
        with pytest.raises(TemplateError, match="MISSING"):
            TemplateParser(context={}, interpolate=True).parse_from_string("apps:\n  - name: ${MISSING}\n")

    def test_env_file(self, tmp_path):
        """Test that .env files extend the context."""
        env_file = tmp_path / "pod.env"
        env_file.write_text("POD_APP=from-file\n")
        parser = TemplateParser(context={"POD_APP": "from-env"}, env_files=[str(env_file)])
        manifest = parser.parse_from_string("apps:\n  - name: ${POD_APP}\n")
        assert manifest.apps[0].name == "from-file"

    def test_variables_kept_without_interpolation(self):
        """Test that container-side shell variables pass through untouched by default."""
        content = 'apps:\n  - name: foo\n    app:\n      exec: [/bin/sh, -c, "echo ${HOSTNAME_IN_CONTAINER} $$"]\n'
        manifest = TemplateParser(context={}).parse_from_string(content)
        assert manifest.apps[0].app.exec_ == ["/bin/sh", "-c", "echo ${HOSTNAME_IN_CONTAINER} $$"]

    def test_numeric_exec_and_environment(self):
        """Test that YAML numbers in string fields become strings."""
        content = (
            "acVersion: 0.8\n"
            "apps:\n"
            "  - name: sleeper\n"
            "    app:\n"
            "      exec: [/bin/sleep, 1000]\n"
            "      environment:\n"
            "        - name: PORT\n"
            "          value: 8080\n"
            "        - name: RATIO\n"
            "          value: 0.5\n"
        )
        manifest = TemplateParser(context={}).parse_from_string(content)
        app = manifest.apps[0].app
        assert app.exec_ == ["/bin/sleep", "1000"]
        assert [(e.name, e.value) for e in app.environment] == [("PORT", "8080"), ("RATIO", "0.5")]
        assert manifest.ac_version == "0.8"

    def test_missing_env_file_raises(self, tmp_path):
        """Test that a missing .env file is reported."""
        with pytest.raises(TemplateError):
            TemplateParser(context={}, env_files=[str(tmp_path / "missing.env")])


class TestTemplateInterpolator:
    """Tests for TemplateInterpolator."""

    def test_default_value(self):
        assert TemplateInterpolator({}).interpolate("${A:-x}") == "x"
        assert TemplateInterpolator({"A": "y"}).interpolate("${A:-x}") == "y"

    def test_alternative_value(self):
        assert TemplateInterpolator({"A": "y"}).interpolate("${A:+set}") == "set"
        assert TemplateInterpolator({}).interpolate("${A:+set}") == ""

    def test_escaped_dollar(self):
        assert TemplateInterpolator({}).interpolate("cost: $$5") == "cost: $5"

    def test_unset_raises(self):
        with pytest.raises(KeyError):
            TemplateInterpolator({}).interpolate("${A}")
