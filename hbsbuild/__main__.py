from hbsbuild.main import entrypoint

entrypoint()
