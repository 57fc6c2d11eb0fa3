# gpt-review: answers @rs-gpt-review mentions on issues and pull requests
