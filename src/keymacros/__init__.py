# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

# Pipeline stages
# device level:
# stage 0: find the keypad with xinput (or take an explicit event node), read raw input_event records
# stage 1: keep only keydown events and forward their key codes over a memory channel
# matching level:
# stage 2: accumulate key codes into a candidate sequence, resetting after a pause
# stage 3: look the candidate up in the sequence trie and dispatch the bound command
