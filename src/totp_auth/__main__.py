import sys

from totp_auth.cli import main


sys.exit(main())
