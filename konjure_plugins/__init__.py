# konjure_plugins/__init__.py
# 插件包：每个子目录都是一个带 manifest.json 的插件
