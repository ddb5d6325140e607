"""Shared test fixtures: sample svn output documents and a fake svn executable."""

from __future__ import annotations

import json
import os
import stat
import sys
import textwrap
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
import structlog

from svnscope.config.schema import SvnConfig, SvnScopeConfig


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo any configure_logging() done by a CLI test."""
    yield
    structlog.reset_defaults()


# ── svn status --xml ──────────────────────────────────────────────────────────


@pytest.fixture
def sample_status_xml() -> str:
    """Status of /wc: a modified file, an unversioned file, a conflict below src/."""
    return textwrap.dedent("""\
        <?xml version="1.0" encoding="UTF-8"?>
        <status>
        <target path="/wc">
        <entry path="/wc/README.txt">
        <wc-status item="modified" revision="12" props="none">
        <commit revision="10">
        <author>alice</author>
        <date>2024-01-02T03:04:05.000000Z</date>
        </commit>
        </wc-status>
        </entry>
        <entry path="/wc/new.txt">
        <wc-status item="unversioned" props="none">
        </wc-status>
        </entry>
        <entry path="/wc/src/app.py">
        <wc-status item="conflicted" revision="12" props="modified">
        <commit revision="11">
        <author>bob</author>
        <date>2024-01-03T10:00:00.000000Z</date>
        </commit>
        <lock>
        <token>opaquelocktoken:1234</token>
        <owner>carol</owner>
        <comment>editing</comment>
        <created>2024-01-04T00:00:00.000000Z</created>
        </lock>
        </wc-status>
        </entry>
        <entry path="/wc/docs">
        <wc-status item="added" revision="-1" props="none">
        </wc-status>
        </entry>
        <entry path="/wc/lib/util.py">
        <wc-status item="normal" revision="12" props="none">
        <commit revision="9">
        <author>alice</author>
        <date>2023-12-30T08:00:00.000000Z</date>
        </commit>
        </wc-status>
        </entry>
        <against revision="12"/>
        </target>
        </status>
    """)


@pytest.fixture
def single_entry_status_xml() -> str:
    return textwrap.dedent("""\
        <?xml version="1.0" encoding="UTF-8"?>
        <status>
        <target path="/wc">
        <entry path="/wc/README.txt">
        <wc-status item="modified" revision="12" props="none">
        <commit revision="10">
        <author>alice</author>
        <date>2024-01-02T03:04:05.000000Z</date>
        </commit>
        </wc-status>
        </entry>
        </target>
        </status>
    """)


# ── svn log --xml --verbose ───────────────────────────────────────────────────


@pytest.fixture
def sample_log_xml() -> str:
    return textwrap.dedent("""\
        <?xml version="1.0" encoding="UTF-8"?>
        <log>
        <logentry revision="12">
        <author>alice</author>
        <date>2024-01-02T03:04:05.000000Z</date>
        <paths>
        <path action="M" kind="file" prop-mods="false" text-mods="true">/trunk/README.txt</path>
        <path action="A" kind="dir" copyfrom-path="/trunk/lib" copyfrom-rev="8">/branches/feature</path>
        </paths>
        <msg>Update readme</msg>
        </logentry>
        <logentry revision="11">
        <date>2024-01-01T00:00:00.000000Z</date>
        <msg></msg>
        </logentry>
        </log>
    """)


# ── svn info --xml ────────────────────────────────────────────────────────────


@pytest.fixture
def sample_info_xml() -> str:
    return textwrap.dedent("""\
        <?xml version="1.0" encoding="UTF-8"?>
        <info>
        <entry kind="dir" path="." revision="12">
        <url>https://svn.example.com/repo/trunk</url>
        <relative-url>^/trunk</relative-url>
        <repository>
        <root>https://svn.example.com/repo</root>
        <uuid>5e7d134a-54fb-0310-bd04-b611643e5c25</uuid>
        </repository>
        <wc-info>
        <wcroot-abspath>/home/user/wc</wcroot-abspath>
        <schedule>normal</schedule>
        <depth>infinity</depth>
        </wc-info>
        <commit revision="10">
        <author>alice</author>
        <date>2024-01-02T03:04:05.000000Z</date>
        </commit>
        </entry>
        </info>
    """)


# ── svn blame --xml ───────────────────────────────────────────────────────────


@pytest.fixture
def sample_blame_xml() -> str:
    return textwrap.dedent("""\
        <?xml version="1.0" encoding="UTF-8"?>
        <blame>
        <target path="README.txt">
        <entry line-number="2">
        <commit revision="7">
        <author>bob</author>
        <date>2024-01-01T12:00:00.000000Z</date>
        </commit>
        </entry>
        <entry line-number="1">
        <commit revision="3">
        <author>alice</author>
        <date>2023-06-01T09:00:00.000000Z</date>
        </commit>
        </entry>
        <entry line-number="3">
        </entry>
        </target>
        </blame>
    """)


# ── svn list --xml -v ─────────────────────────────────────────────────────────


@pytest.fixture
def sample_list_xml() -> str:
    return textwrap.dedent("""\
        <?xml version="1.0" encoding="UTF-8"?>
        <lists>
        <list path="https://svn.example.com/repo/trunk/">
        <entry kind="dir">
        <name>src</name>
        <commit revision="12">
        <author>alice</author>
        <date>2024-01-02T03:04:05.000000Z</date>
        </commit>
        </entry>
        <entry kind="file">
        <name>README.txt</name>
        <size>1024</size>
        <commit revision="10">
        <author>bob</author>
        <date>2023-12-31T23:59:59.000000Z</date>
        </commit>
        <lock>
        <token>opaquelocktoken:abcd</token>
        <owner>carol</owner>
        <created>2024-01-04T00:00:00.000000Z</created>
        </lock>
        </entry>
        </list>
        </lists>
    """)


# ── svn propget svn:externals -R ──────────────────────────────────────────────


@pytest.fixture
def sample_externals_text() -> str:
    return textwrap.dedent("""\
        /wc - ^/vendor/lib@40 third_party/lib
        -r42 http://example.com/repo/lib vendor/lib
        # pinned tooling

        /wc/sub - http://svn.example.com/tools tools
    """)


# ── svn diff ──────────────────────────────────────────────────────────────────


@pytest.fixture
def sample_svn_diff() -> str:
    """Two files: a hunk starting at line 10 and a one-line hunk without counts."""
    return textwrap.dedent("""\
        Index: src/app.py
        ===================================================================
        --- src/app.py\t(revision 12)
        +++ src/app.py\t(working copy)
        @@ -10,3 +10,4 @@
         def main():
        -    return 1
        +    value = compute()
        +    return value
         done = True
        Index: README.txt
        ===================================================================
        --- README.txt\t(revision 12)
        +++ README.txt\t(working copy)
        @@ -1 +1 @@
        -old
        +new
        \\ No newline at end of file
    """)


@pytest.fixture
def sample_property_diff() -> str:
    return textwrap.dedent("""\
        Index: lib/util.py
        ===================================================================
        --- lib/util.py\t(revision 12)
        +++ lib/util.py\t(working copy)
        @@ -1,2 +1,2 @@
        -a = 1
        +a = 2
         b = 3

        Property changes on: lib/util.py
        ___________________________________________________________________
        Added: svn:eol-style
        ## -0,0 +1 ##
        +native
    """)


@pytest.fixture
def sample_binary_diff() -> str:
    return textwrap.dedent("""\
        Index: logo.png
        ===================================================================
        Cannot display: file marked as a binary type.
        svn:mime-type = application/octet-stream
    """)


# ── fake svn executable ───────────────────────────────────────────────────────

# Replies are read from FAKE_SVN_DIR/<subcommand>.{out,err,code,sleep};
# every call is appended as a JSON line to FAKE_SVN_RECORD.
_FAKE_SVN_BODY = '''\
import json
import os
import sys
import time

args = sys.argv[1:]
config_dir = None
rest = []
i = 0
while i < len(args):
    if args[i] == "--config-dir":
        config_dir = args[i + 1]
        i += 2
    elif args[i] == "--trust-server-cert-failures":
        i += 2
    elif args[i] == "--non-interactive":
        i += 1
    else:
        rest.append(args[i])
        i += 1

sub = rest[0] if rest else ""
reply_dir = os.environ.get("FAKE_SVN_DIR", "")


def reply(suffix):
    path = os.path.join(reply_dir, sub + suffix)
    if reply_dir and os.path.exists(path):
        with open(path, encoding="utf-8") as f:
            return f.read()
    return None


servers = None
servers_mode = None
if config_dir and os.path.exists(os.path.join(config_dir, "servers")):
    servers_path = os.path.join(config_dir, "servers")
    servers_mode = os.stat(servers_path).st_mode & 0o777
    with open(servers_path, encoding="utf-8") as f:
        servers = f.read()

record = os.environ.get("FAKE_SVN_RECORD")
if record:
    with open(record, "a", encoding="utf-8") as f:
        f.write(json.dumps({
            "argv": args,
            "args": rest,
            "cwd": os.getcwd(),
            "lang": os.environ.get("LANG"),
            "lc_all": os.environ.get("LC_ALL"),
            "config_dir": config_dir,
            "servers": servers,
            "servers_mode": servers_mode,
        }) + "\\n")

delay = reply(".sleep")
if delay:
    time.sleep(float(delay))
out = reply(".out")
if out:
    sys.stdout.write(out)
err = reply(".err")
if err:
    sys.stderr.write(err)
code = reply(".code")
sys.exit(int(code) if code else 0)
'''


@dataclass
class FakeSvn:
    executable: Path
    replies: Path
    record: Path

    def respond(
        self,
        subcommand: str,
        stdout: str = "",
        stderr: str = "",
        exit_code: int = 0,
        sleep: Optional[float] = None,
    ) -> None:
        (self.replies / f"{subcommand}.out").write_text(stdout, encoding="utf-8")
        (self.replies / f"{subcommand}.err").write_text(stderr, encoding="utf-8")
        (self.replies / f"{subcommand}.code").write_text(str(exit_code), encoding="utf-8")
        if sleep is not None:
            (self.replies / f"{subcommand}.sleep").write_text(str(sleep), encoding="utf-8")

    def calls(self) -> List[Dict[str, Any]]:
        if not self.record.exists():
            return []
        return [json.loads(line) for line in self.record.read_text(encoding="utf-8").splitlines()]

    def config(self, **svn_options: Any) -> SvnScopeConfig:
        return SvnScopeConfig(svn=SvnConfig(executable=str(self.executable), **svn_options))


@pytest.fixture
def fake_svn(tmp_path: Path, monkeypatch) -> FakeSvn:
    """An executable standing in for svn, driven by reply files."""
    if os.name == "nt":
        pytest.skip("fake svn script needs a POSIX shebang")

    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    replies = tmp_path / "replies"
    replies.mkdir()
    script = bin_dir / "svn"
    script.write_text(f"#!{sys.executable}\n{_FAKE_SVN_BODY}", encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    record = tmp_path / "calls.jsonl"
    monkeypatch.setenv("FAKE_SVN_DIR", str(replies))
    monkeypatch.setenv("FAKE_SVN_RECORD", str(record))
    return FakeSvn(executable=script, replies=replies, record=record)


@pytest.fixture
def working_copy(tmp_path: Path) -> Path:
    """A plain directory laid out like a small checkout."""
    wc = tmp_path / "wc"
    (wc / ".svn").mkdir(parents=True)
    (wc / "src").mkdir()
    (wc / "docs").mkdir()
    (wc / "lib").mkdir()
    (wc / "README.txt").write_text("hello\n")
    (wc / "new.txt").write_text("draft\n")
    (wc / "src" / "app.py").write_text("print('hi')\n")
    (wc / "lib" / "util.py").write_text("a = 1\n")
    return wc
