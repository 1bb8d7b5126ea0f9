"""
Shared fixtures: a process runner that records commands instead of running them.
"""
import subprocess
import pytest
from podtmpl.RUNNERS.process_runner import ProcessRunner
from podtmpl.REGISTRY.image_fetcher import ImageFetcher
from podtmpl.REGISTRY.image_reference import ImageID

FETCHED_ID = "sha512-0123456789abcdef"


class FakeRunner(ProcessRunner):
    """
    Records every argument vector; answers from a table keyed by command prefix.
    """
    def __init__(self, sudo: bool = True):
        super().__init__(sudo=sudo)
        self.calls = []
        self.responses = {}

    def respond(self, prefix, returncode=0, stdout=""):
        self.responses[tuple(prefix)] = (returncode, stdout)

    def _execute(self, argv, input, capture):
        self.calls.append({"argv": argv, "input": input, "capture": capture})
        command = argv[1:] if self.sudo else argv
        returncode, stdout = 0, ""
        best = -1
        for prefix, response in self.responses.items():
            if tuple(command[:len(prefix)]) == prefix and len(prefix) > best:
                best = len(prefix)
                returncode, stdout = response
        return subprocess.CompletedProcess(argv, returncode, stdout.encode() if capture else None)

    @property
    def commands(self):
        return [call["argv"] for call in self.calls]


class FakeFetcher(ImageFetcher):
    """
    Returns a fixed identifier and remembers what was requested.
    """
    def __init__(self, image_id: str = FETCHED_ID):
        self.image_id = image_id
        self.references = []

    def fetch(self, reference):
        self.references.append(str(reference))
        return ImageID.parse(self.image_id)


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def template(tmp_path):
    """
    Writes a pod template and returns its path.
    """
    def write(content: str, name: str = "pod-template.yaml") -> str:
        path = tmp_path / name
        path.write_text(content)
        return str(path)
    return write
