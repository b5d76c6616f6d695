"""
api 包初始化文件
"""
