"""
retro_step6502: 命令単位の MOS 6502 エミュレータとシングルステップデバッガ。
"""
__version__ = "0.1.0"
