# Copyright 2025 iGenius S.p.A
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

_GLYPH = {
    "RUNNING": "●",
    "NOT_RUNNING": "✖",
}

# Optional ASCII fallback (set SLEDGEHAMMER_ASCII=1 to enable)
_ASCII_GLYPH = {
    "RUNNING": "*",
    "NOT_RUNNING": "x",
}

STATE_STYLE = {
    "RUNNING": "bold white on green3",
    "NOT_RUNNING": "bold white on red3",
}

STATE_LABEL = {
    "RUNNING": "Running",
    "NOT_RUNNING": "Not Running",
}


def state_style(s: str) -> str:
    return STATE_STYLE.get(s, STATE_STYLE["NOT_RUNNING"])


def state_glyph(s: str, *, ascii: bool = False) -> str:
    table = _ASCII_GLYPH if ascii else _GLYPH
    return table.get(s, "?")
