# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

# Input capture stages
# device level:
# stage 0: OS-specific; watch the global input hook and issue raw signals, or replay a recording

# pipeline level:
# stage 1: track modifier keydown/up and turn key presses into characters
# stage 2: stamp and buffer logged events
# stage 3: drain the buffer into the log file
