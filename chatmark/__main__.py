# Chatmark project, MIT license.
#
# You're free to copy this file to your project and edit it for your needs,
# just keep this copyright line please :3

import chatmark.cli

if __name__ == "__main__":
    chatmark.cli.run()
